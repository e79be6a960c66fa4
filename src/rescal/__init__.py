"""
Rescal - Resource Utilization Calendar

This package contains the Rescal backend services:
- scheduling: utilization sweep, bands, summaries, calendar view model
- storage: database adapter and repositories for resources and assignments
- api: FastAPI REST endpoints
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
