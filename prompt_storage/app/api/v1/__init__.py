"""
API v1 package for the prompt storage service.

This package contains the prompt routes, their dependencies and error handlers.
"""

# Import all route modules
from . import errors, deps

# Import API routers
from .api import router

__all__ = ["router", "errors", "deps"]
