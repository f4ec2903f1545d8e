"""FastAPI service for booking gym classes.

This package provides REST API endpoints for managing members, classes
and the bookings that tie them together.
"""

__version__ = "0.1.0"
