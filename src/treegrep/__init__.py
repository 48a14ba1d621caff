"""treegrep - concurrent text search with an optional in-memory content index."""

__version__ = "0.1.0"
