"""
API sub-package for the Contributor Board service.

This package contains the FastAPI application, route definitions and Pydantic
request/response models. Import `api.main` or routers from `api.routes` directly.
"""

__all__ = []
