"""WeChat credential cache, request signing and feature clients."""

from __future__ import annotations

from .factory import WeChat, create_client

__all__ = ["WeChat", "create_client"]
