"""GUI helpers: log forwarding, image conversion and app paths."""
