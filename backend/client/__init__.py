"""
Python client for the PG Community API.

Pairs the HTTP calls with the local session state in backend.state.
"""

from .auth_client import AuthClient

__all__ = ["AuthClient"]
