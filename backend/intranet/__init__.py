"""Condominium association intranet backend."""
