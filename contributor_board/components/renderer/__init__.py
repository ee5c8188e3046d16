"""
Renderer component for the Contributor Board service.

This sub-package lays a board out as HTML and rasterizes it to PNG with a
headless browser.
"""
from .board_template import render_board_html, BOARD_WIDTH, BOARD_HEIGHT
from .playwright_manager import PlaywrightManager

__all__ = [
    "render_board_html",
    "BOARD_WIDTH",
    "BOARD_HEIGHT",
    "PlaywrightManager",
]
