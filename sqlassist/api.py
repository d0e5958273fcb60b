"""sqlassist.api

FastAPI HTTP surface.

- POST /execute-preview : run a confirmed preview
- POST /chat            : tool-calling chat turn (needs Azure OpenAI)
- GET  /health          : liveness + pending preview count

Run with `python scripts/run_server.py`.
"""

from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sqlassist.errors import AppError
from sqlassist.main import Services, build_services

STATUS_BY_CODE = {
    "forbidden-statement": 400,
    "rbac-denied": 403,
    "unknown-role": 403,
    "preview-not-found": 404,
    "execution-error": 500,
    "internal-error": 500,
    "invalid-request": 400,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ExecutePreviewRequest(_CamelModel):
    preview_id: Optional[str] = Field(default=None, alias="previewId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    user_role: Optional[str] = Field(default=None, alias="userRole")


class ChatMessage(BaseModel):
    role: str
    content: str = ""


class ChatRequest(_CamelModel):
    messages: list[ChatMessage]
    user_id: Optional[str] = Field(default=None, alias="userId")
    user_role: Optional[str] = Field(default=None, alias="userRole")


def _error(status: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"ok": False, "error": message, "code": code})


def create_app(services: Optional[Services] = None) -> FastAPI:
    svc = services or build_services()
    logger = svc.logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        svc.sweeper.start()
        try:
            yield
        finally:
            svc.sweeper.stop()

    app = FastAPI(title="SQL Assistant API", lifespan=lifespan)
    app.state.services = svc

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "pendingPreviews": len(svc.previews)}

    @app.post("/execute-preview")
    def execute_preview(body: ExecutePreviewRequest):
        if not body.preview_id:
            return _error(400, "previewId required", "invalid-request")

        try:
            res = svc.orchestrator.execute(preview_id=body.preview_id, user_id=body.user_id, user_role=body.user_role)
        except Exception:
            logger.exception("execute-preview failed")
            return _error(500, "unknown error", "internal-error")

        if not res.ok:
            return _error(STATUS_BY_CODE.get(res.error.code, 500), res.error.message, res.error.code)
        return JSONResponse(content=jsonable_encoder({"ok": True, "rows": res.rows, "executedQuery": res.executed_query}))

    @app.post("/chat")
    def chat(body: ChatRequest):
        if svc.chat is None:
            return _error(503, "Chat is unavailable: Azure OpenAI is not configured", "internal-error")

        try:
            turn = svc.chat.reply(
                [m.model_dump() for m in body.messages], user_id=body.user_id, user_role=body.user_role
            )
        except AppError as e:
            logger.error("chat failed: %s", e)
            return _error(502, str(e), "internal-error")
        except Exception:
            logger.exception("chat failed")
            return _error(500, "unknown error", "internal-error")

        return JSONResponse(content=jsonable_encoder({
            "answer": turn.answer,
            "toolCalls": [{"name": c.name, "arguments": c.arguments, "result": c.result} for c in turn.tool_calls],
        }))

    return app
