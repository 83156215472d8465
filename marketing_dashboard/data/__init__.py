"""Row parsing, filtering, normalization, and the in-memory snapshot store."""
