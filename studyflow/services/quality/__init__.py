"""Question quality services."""
