"""Service layer for the intranet backend."""
