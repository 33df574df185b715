"""FastAPI application exposing the relay store over JSON/HTTP."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from .config import load_config
from .errors import ValidationError
from .store import RelayStore

logger = logging.getLogger(__name__)

OPEN_CORS = {"Access-Control-Allow-Origin": "*"}


# -----------------------------
# Pydantic request bodies
# -----------------------------
# All fields optional and untyped; the store owns validation.
class _Lenient(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MessageIn(_Lenient):
    room_id: Any = Field(default=None, alias="roomId")
    encrypted: Any = None
    is_me: Any = Field(default=None, alias="isMe")
    at: Any = None
    ratchet_index: Any = Field(default=None, alias="ratchetIndex")
    sender_alias: Any = Field(default=None, alias="senderAlias")
    signature: Any = None
    expires_in: Any = Field(default=None, alias="expiresIn")


class ParticipantIn(_Lenient):
    room_id: Any = Field(default=None, alias="roomId")
    alias: Any = None
    public_key: Any = Field(default=None, alias="publicKey")


class WipeIn(_Lenient):
    room_ids: Any = Field(default=None, alias="roomIds")


# -----------------------------
# Utilities
# -----------------------------
async def _json_object(request: Request) -> Dict[str, Any]:
    """Request body as a dict; empty, malformed or non-object JSON becomes {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.debug("Malformed JSON body on %s, treating as empty", request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


def resolve_asset(web_dir: Path, rel_path: str, index: str) -> Optional[Path]:
    """Map a URL path onto a file under ``web_dir``.

    Returns the requested file, else the index document (SPA fallback),
    else None. Raises PermissionError for paths escaping ``web_dir``.
    """
    root = web_dir.resolve()
    rel_path = rel_path.lstrip("/") or index
    target = (root / rel_path).resolve()
    if target != root and root not in target.parents:
        raise PermissionError(rel_path)
    if target.is_file():
        return target
    fallback = root / index
    return fallback if fallback.is_file() else None


# -----------------------------
# App factory
# -----------------------------
def create_app(
    config_path: Optional[str] = None,
    store: Optional[RelayStore] = None,
) -> FastAPI:
    cfg = load_config(config_path)

    cors_origins = cfg.get("server", {}).get("cors_origins", ["*"])
    static_cfg = cfg.get("static", {})
    web_dir = Path(static_cfg.get("web_dir") or "build/web")
    index_name = str(static_cfg.get("index") or "index.html")

    store = store or RelayStore()

    app = FastAPI(title="Relay Server", version="1.0.0")
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True}

    # ---------------- Messages ----------------
    @app.post("/api/messages")
    async def post_message(request: Request) -> Dict[str, Any]:
        req = MessageIn.model_validate(await _json_object(request))
        store.post_message(req.room_id, req.model_dump(by_alias=True))
        return {"ok": True}

    @app.get("/api/messages")
    async def get_messages(room_id: Optional[str] = Query(None, alias="roomId")) -> JSONResponse:
        return JSONResponse(store.get_messages(room_id), headers=OPEN_CORS)

    # ---------------- Participants ----------------
    @app.post("/api/participants")
    async def post_participant(request: Request) -> Dict[str, Any]:
        req = ParticipantIn.model_validate(await _json_object(request))
        store.post_participant(req.room_id, req.alias, req.public_key)
        return {"ok": True}

    @app.get("/api/participants")
    async def get_participants(room_id: Optional[str] = Query(None, alias="roomId")) -> JSONResponse:
        return JSONResponse(store.get_participants(room_id), headers=OPEN_CORS)

    # ---------------- Wipe ----------------
    @app.post("/api/wipe")
    async def wipe(request: Request) -> Dict[str, Any]:
        req = WipeIn.model_validate(await _json_object(request))
        store.wipe(req.room_ids)
        return {"ok": True}

    # ---------------- Static web client ----------------
    @app.get("/{full_path:path}", include_in_schema=False)
    def static_asset(full_path: str) -> Response:
        try:
            path = resolve_asset(web_dir, full_path, index_name)
        except PermissionError:
            logger.warning("Blocked static path outside web dir: %s", full_path)
            return Response(status_code=403)
        if path is None:
            return Response(status_code=404)
        return FileResponse(str(path))

    return app
