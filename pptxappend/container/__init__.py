"""Incremental editing of presentation packages (pptx ZIP containers)."""
