"""
Routers package for FastAPI endpoints.

Organized by domain:
- auth: Registration and login
- documents: Upload, listing, analysis and deletion of documents
"""

from . import auth, documents

__all__ = ["auth", "documents"]
