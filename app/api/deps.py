"""
app/api/deps.py

Purpose: Request dependencies

- Hands the application's LinkRegistry to route handlers
- Resolves the public base URL for new short links
"""

from fastapi import Request
from typing import Optional

from app.core.config import settings
from app.services.link_registry import LinkRegistry


def get_optional_registry(request: Request) -> Optional[LinkRegistry]:
    """Registry built during application startup, or None before startup."""
    return getattr(request.app.state, "registry", None)


def get_registry(request: Request) -> LinkRegistry:
    """Registry built during application startup."""
    registry = get_optional_registry(request)
    if registry is None:
        raise RuntimeError("Link registry not initialized. Is the application lifespan running?")
    return registry


def get_base_url(request: Request) -> str:
    """
    Public base URL for short links.
    PUBLIC_BASE_URL wins; otherwise the scheme and host of the request.
    """
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL
    return str(request.base_url).rstrip("/")
