"""Question generation services."""
