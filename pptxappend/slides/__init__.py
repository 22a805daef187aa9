"""In-memory description of slides to append."""
