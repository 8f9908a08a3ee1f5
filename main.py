"""
Main API module for Shortlinks.

Responsibilities:
    - Expose REST endpoints to create, list, inspect and delete short links
    - Resolve short links: redirect browsers, answer API clients with JSON
    - Report route-level events to the log sink

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - The store backend comes from configuration (memory by default).
    - LinkManager owns validation, code generation, expiry and access counting;
      routes only translate its results and errors to HTTP.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected dependencies, and a clean separation between API and business logic."
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from shortlinks.config import settings
from shortlinks.errors import CodeTakenError, ShortlinkError
from shortlinks.logsink import get_log_sink
from shortlinks.manager.link_manager import LinkManager
from shortlinks.manager.validators import is_valid_code
from shortlinks.storage.storage_factory import get_store

EXPIRED_OR_MISSING = "This short link has expired or does not exist"


class ShortenRequest(BaseModel):
    """Request payload for creating a new short link."""
    url: str
    shortcode: Optional[str] = None
    validity: Optional[float] = Field(default=None, description="Minutes the link stays live.")


class MappingOut(BaseModel):
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    access_count: int


class ShortenOut(MappingOut):
    short_url: str


def route_roots(app: FastAPI) -> FrozenSet[str]:
    """First path segments of the app's fixed routes that would also pass as shortcodes."""
    roots = set()
    for route in app.routes:
        root = getattr(route, "path", "").strip("/").split("/")[0]
        if is_valid_code(root):
            roots.add(root)
    return frozenset(roots)


def create_app(manager: Optional[LinkManager] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        manager (Optional[LinkManager]): Pre-wired manager (tests); built from
            configuration when omitted.

    Returns:
        FastAPI: A fully configured application instance.

    Why an app factory?
        - Enables per-test isolation in pytest.
        - Encourages dependency injection and easy swapping of implementations.
        - Avoids accidental global state across workers/processes.
    """
    log = logging.getLogger("shortlinks")

    # basic console logging (optional)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    if manager is None:
        manager = LinkManager(store=get_store(), log_sink=get_log_sink())
        log.info("Shortlinks store backend: %s", type(manager.repository.store).__name__)
    sink = manager.log_sink

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        sink.close()

    app = FastAPI(
        title="Shortlinks",
        description="Expiring short links with access counts and remote event logging",
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.manager = manager

    def _event(level: str, message: str) -> None:
        sink.log("backend", level, "route", message)

    def _wants_html(request: Request) -> bool:
        """Browsers ask for text/html; API clients usually send application/json or */*."""
        return "text/html" in request.headers.get("accept", "").lower()

    # Health check
    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.post("/shorturls", status_code=status.HTTP_201_CREATED, response_model=ShortenOut)
    def create_short_url(req: ShortenRequest) -> Dict[str, Any]:
        """
        Create a short link.

        Raises:
            HTTPException: 409 when the custom shortcode is taken or reserved,
                400 for any other validation failure.
        """
        try:
            result = manager.create(req.url, custom_code=req.shortcode, validity_minutes=req.validity)
        except CodeTakenError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
        except ShortlinkError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        return result.model_dump()

    @app.get("/shorturls", response_model=List[MappingOut])
    def list_short_urls() -> List[Dict[str, Any]]:
        return [m.model_dump() for m in manager.list()]

    @app.get("/shorturls/{shortcode}", response_model=MappingOut)
    def short_url_stats(shortcode: str) -> Dict[str, Any]:
        """Statistics for one live link; does not count as an access."""
        mapping = manager.get(shortcode)
        if mapping is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EXPIRED_OR_MISSING)
        return mapping.model_dump()

    @app.delete("/shorturls/{shortcode}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_short_url(shortcode: str) -> Response:
        if not manager.delete(shortcode):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short link not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/{shortcode}")
    def redirect_short_url(shortcode: str, request: Request) -> Response:
        """
        Resolve a short link.

        Returns:
            302 redirect for browsers, JSON {original_url, access_count} otherwise.

        Raises:
            HTTPException: 404 when the link has expired or never existed.
        """
        _event("INFO", f"Attempting to resolve shortcode: {shortcode}")
        mapping = manager.resolve_mapping(shortcode)
        if mapping is None:
            _event("WARN", f"Shortcode not found or expired: {shortcode}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EXPIRED_OR_MISSING)

        _event("INFO", f"Redirecting to: {mapping.original_url}")
        if _wants_html(request):
            return RedirectResponse(url=mapping.original_url, status_code=status.HTTP_302_FOUND)

        return JSONResponse({"original_url": mapping.original_url, "access_count": mapping.access_count})

    # "/health" and friends must never be handed out as shortcodes
    manager.reserved_codes = manager.reserved_codes | route_roots(app)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()
