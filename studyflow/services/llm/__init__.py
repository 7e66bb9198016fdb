"""Completion service client."""
