"""
API Routers for the Image Toolkit
"""

from . import image

__all__ = ["image"]
