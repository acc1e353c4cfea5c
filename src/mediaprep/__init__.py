"""mediaprep - stream selection, encoding and retagging for media libraries."""

__version__ = "0.3.0"
