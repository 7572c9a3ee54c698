"""User-facing text and application bootstrap."""
