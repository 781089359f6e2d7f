"""
Coordinate Reference System (CRS) management module for PyIDW.

This module handles CRS parsing, coordinate validation and reprojection
into planar coordinates using pyproj.
"""

from .crs_manager import CRSManager, crs_manager

__all__ = ['CRSManager', 'crs_manager']
