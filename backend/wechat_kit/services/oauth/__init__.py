"""User-scoped OAuth web authorization."""
