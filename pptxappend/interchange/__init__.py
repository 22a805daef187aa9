"""Line oriented text form of slides and its raster codecs."""
