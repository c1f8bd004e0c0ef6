"""Government welfare scheme finder: profile matching, ranking and catalog search."""

__version__ = "0.1.0"
