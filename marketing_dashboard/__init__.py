"""Marketing Dashboard — ad-platform and notes export normalization and aggregation."""

__version__ = "1.0.0"
