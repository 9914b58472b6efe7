import json
import logging
from functools import lru_cache
from typing import Optional, Type, TypeVar

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .db import SqlStorage
from .errors import BadRequest, NotFound, OperationFailed
from .listing import thread_full
from .models import ReplyCreate, ReplyDelete, ReplyReport, ThreadCreate, ThreadDelete, ThreadReport
from .schemas import Health, ThreadDetail, ThreadFull, ThreadSummary
from .service import BoardService
from .storage import Storage

logger = logging.getLogger(__name__)

app = FastAPI(title="Anonymous Message Board API", version="1.0.0")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

SECURITY_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "same-origin",
}

Schema = TypeVar("Schema", bound=BaseModel)


@lru_cache
def get_service() -> BoardService:
    if config.DATABASE_URL:
        store = SqlStorage(config.DATABASE_URL)
    else:
        store = Storage()
    logger.info("Using %s", type(store).__name__)
    return BoardService(store)


# === Helpers ===


async def read_payload(request: Request) -> dict:
    """Body fields from either a JSON document or an urlencoded form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except ValueError:
        raise BadRequest("invalid json body")
    if not isinstance(payload, dict):
        raise BadRequest("body must be an object")
    return payload


def parse(schema: Type[Schema], payload: dict) -> Schema:
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise BadRequest("missing or invalid " + ", ".join(fields))


# === Error boundary ===
# Logical failures answer 200 with the error in the body.


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse({"error": str(exc)})


@app.exception_handler(BadRequest)
async def bad_request_handler(request: Request, exc: BadRequest):
    return JSONResponse({"error": str(exc)})


@app.exception_handler(OperationFailed)
async def operation_failed_handler(request: Request, exc: OperationFailed):
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "operation failed"})


@app.exception_handler(StarletteHTTPException)
async def unknown_route_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# === Health ===


@app.get("/api/health", response_model=Health)
def health():
    return Health()


# === Thread endpoints ===


@app.get("/api/threads/{board}", response_model=list[ThreadSummary], response_model_by_alias=True)
def list_threads(board: str, service: BoardService = Depends(get_service)):
    return service.list_board(board)


@app.post("/api/threads/{board}", response_model=ThreadFull, response_model_by_alias=True)
def create_thread(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ThreadCreate, payload)
    thread = service.create_thread(board, body.text, body.delete_password)
    return thread_full(thread)


@app.put("/api/threads/{board}", response_class=PlainTextResponse)
def report_thread(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ThreadReport, payload)
    service.report_thread(board, body.report_id)
    return "success"


@app.delete("/api/threads/{board}", response_class=PlainTextResponse)
def delete_thread(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ThreadDelete, payload)
    result = service.delete_thread(board, body.thread_id, body.delete_password)
    return result.value


# === Reply endpoints ===


@app.get("/api/replies/{board}", response_model=ThreadDetail, response_model_by_alias=True)
def get_thread(
    board: str,
    thread_id: Optional[str] = None,
    service: BoardService = Depends(get_service),
):
    if not thread_id:
        raise BadRequest("missing or invalid thread_id")
    return service.list_thread(board, thread_id)


@app.post("/api/replies/{board}", response_model=ThreadFull, response_model_by_alias=True)
def create_reply(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ReplyCreate, payload)
    thread = service.create_reply(board, body.thread_id, body.text, body.delete_password)
    return thread_full(thread)


@app.put("/api/replies/{board}", response_class=PlainTextResponse)
def report_reply(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ReplyReport, payload)
    service.report_reply(board, body.thread_id, body.reply_id)
    return "success"


@app.delete("/api/replies/{board}", response_class=PlainTextResponse)
def delete_reply(
    board: str,
    payload: dict = Depends(read_payload),
    service: BoardService = Depends(get_service),
):
    body = parse(ReplyDelete, payload)
    result = service.delete_reply(board, body.thread_id, body.reply_id, body.delete_password)
    return result.value
