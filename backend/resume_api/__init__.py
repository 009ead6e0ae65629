"""Resume analysis and portfolio generation API."""

__version__ = "1.0.0"
