"""Content analysis services."""
