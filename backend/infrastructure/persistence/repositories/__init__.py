"""
Repository implementations (adapters) for the domain ports.
"""

from .category import DjangoCategoryRepository

__all__ = ['DjangoCategoryRepository']
