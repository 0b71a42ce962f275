"""jsmodpath - search-path module resolution and module embedding."""

__version__ = "0.1.0"
