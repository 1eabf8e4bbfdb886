"""
Grid persistence.
"""

from .grid_store import GridStore

__all__ = ['GridStore']
