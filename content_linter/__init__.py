"""Content integrity checks for lessons, courses and interview question banks."""

__version__ = "0.4.0"
