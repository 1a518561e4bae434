"""git-delve: interactive per-line git blame explorer."""

__version__ = "0.1.0"
