"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .admin_handler import AdminHandler
from .hazard_handler import HazardHandler

__all__ = [
    "AdminHandler",
    "HazardHandler",
]
