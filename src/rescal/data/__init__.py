"""Sample data for local development and demos."""
