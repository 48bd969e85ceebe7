"""
API routers.
"""
from . import clients, documents

__all__ = ["clients", "documents"]
