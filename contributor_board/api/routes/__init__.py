"""
API Routes sub-package for the Contributor Board service.

The board router from `board_routes.py` is re-exported here for inclusion
in the main FastAPI application setup (`api/main.py`).
"""

from .board_routes import router as board_router

__all__ = [
    "board_router",
]
