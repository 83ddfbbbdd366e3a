"""
Request handlers.

    users.py   CRUD handlers for /users and the route table that binds them
"""

from .users import UserHandlers, build_router

__all__ = [
    "UserHandlers",
    "build_router",
]
