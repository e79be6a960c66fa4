"""Rescal REST API (FastAPI)."""
