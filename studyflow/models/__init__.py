"""Enumerations and pydantic schemas."""
