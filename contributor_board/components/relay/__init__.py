"""
Relay component for the Contributor Board service.

This sub-package fetches remote avatar and background images server side so the
renderer can embed them without cross-origin restrictions.
"""
from .image_relay import ImageRelay, RelayedImage, needs_relay, fallback_avatar_url

__all__ = [
    "ImageRelay",
    "RelayedImage",
    "needs_relay",
    "fallback_avatar_url",
]
