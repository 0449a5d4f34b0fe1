"""Pydantic Schemas — request validation at the HTTP boundary."""
