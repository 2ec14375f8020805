"""PDF merging."""
