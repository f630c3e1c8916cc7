"""HTTP API for warp powers and the user/item inventory."""

from .app import create_app

__all__ = ["create_app"]
