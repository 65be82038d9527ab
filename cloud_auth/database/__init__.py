"""
User persistence adapters.
"""
from cloud_auth.database.store import UserStore

__all__ = ["UserStore"]
