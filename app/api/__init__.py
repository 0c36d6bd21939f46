"""
API module initialization
"""

from . import admin, authors, health, listings, operational, reviews

__all__ = ["admin", "authors", "health", "listings", "operational", "reviews"]
