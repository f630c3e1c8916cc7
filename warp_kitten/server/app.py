# -*- coding: utf-8 -*-
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..log import log
from .api import router as api_router
from .store import InventoryStore, PowerStore


def create_app(
    db_path: Union[str, Path] = ":memory:",
    *,
    seed: bool = True,
    cors_allow_origins: Optional[Sequence[str]] = None,
) -> FastAPI:
    """FastAPI app factory."""

    app = FastAPI(
        title="Warp Kitten API",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )

    origins = list(cors_allow_origins or [])
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.powers = PowerStore()
    app.state.store = InventoryStore(db_path, seed=seed)
    log(f"API ready: db={db_path}, cors={origins or 'off'}")

    @app.on_event("shutdown")
    def _close_store() -> None:
        app.state.store.close()

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    app.include_router(api_router)
    return app
