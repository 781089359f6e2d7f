"""
PyIDW Accessor module.

This module defines the xarray accessor that provides the .pyidw interface.
"""

from .accessor import PyIDWAccessor

__all__ = ["PyIDWAccessor"]
