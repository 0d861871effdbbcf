"""Reference extraction, linked issue traversal and document assembly."""
