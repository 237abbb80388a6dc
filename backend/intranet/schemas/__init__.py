"""Pydantic schemas for the intranet API."""
