"""Pydantic models for API response serialization."""
