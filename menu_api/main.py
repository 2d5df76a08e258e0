import json
import uuid
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from menu_api.core.config import settings
from menu_api.core.errors import EmptyBodyError, MenuItemNotFound, MenuValidationError
from menu_api.core.logging import configure_logging, request_id_ctx
from menu_api.core.sentry import init_sentry
from menu_api.menu import SEED_MENU, MenuCollection, MenuItem, MenuItemDeleted
from menu_api.menu.models import ErrorResponse

configure_logging(settings.log_level, service=settings.app_name, environment=settings.environment)
logger = structlog.get_logger(__name__)

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if init_sentry():
        logger.info("sentry_enabled")
    logger.info("service_started", items=len(app.state.menu))
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.menu = MenuCollection(SEED_MENU if settings.seed_menu else ())
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def get_menu(request: Request) -> MenuCollection:
    return request.app.state.menu


def _parse_item_id(raw: str) -> int:
    # int() alone would also take "0_1", " 3", "+3" and non-ASCII digits
    if not (raw.isascii() and raw.isdigit()):
        raise MenuItemNotFound(raw)
    return int(raw)


def _require_body(payload: dict[str, Any] | None) -> dict[str, Any]:
    if not payload:
        raise EmptyBodyError()
    return payload


def _decode_body(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return {"raw_bytes": len(body)}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    fields: dict[str, Any] = {"method": request.method, "path": request.url.path}
    if settings.log_request_bodies and request.method in ("POST", "PUT"):
        body = await request.body()

        async def receive() -> dict[str, object]:
            return {"type": "http.request", "body": body, "more_body": False}

        request._receive = receive  # type: ignore[attr-defined]
        if body:
            fields["body"] = _decode_body(body)

    logger.info("request_received", **fields)
    response = await call_next(request)
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
    )
    return response


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request_id_token = request_id_ctx.set(request_id)

    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(request_id_token)

    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(MenuValidationError)
async def menu_validation_handler(request: Request, exc: MenuValidationError):
    logger.warning("menu_validation_failed", path=request.url.path, messages=exc.messages)
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "messages": exc.messages},
    )


@app.exception_handler(EmptyBodyError)
async def empty_body_handler(request: Request, exc: EmptyBodyError):
    logger.warning("request_body_missing", path=request.url.path)
    return JSONResponse(status_code=400, content={"error": "Request body required"})


@app.exception_handler(MenuItemNotFound)
async def not_found_handler(request: Request, exc: MenuItemNotFound):
    logger.warning("menu_item_not_found", path=request.url.path, item_id=str(exc.item_id))
    return JSONResponse(status_code=404, content={"error": "Menu item not found"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("request_validation_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limit_exceeded", path=request.url.path)
    return JSONResponse(status_code=429, content={"error": "Too many requests"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "Welcome to the Menu API",
        "endpoints": {
            "GET /api/menu": "Get all menu items",
            "GET /api/menu/:id": "Get a specific menu item by ID",
        },
    }


@app.get("/health")
async def health(menu: MenuCollection = Depends(get_menu)) -> dict[str, Any]:
    return {"status": "ok", "items": len(menu)}


@app.get("/api/menu", response_model=list[MenuItem])
@limiter.limit(settings.api_rate_limit)
async def list_menu(
    request: Request, menu: MenuCollection = Depends(get_menu)
) -> list[MenuItem]:
    return menu.list_all()


@app.get("/api/menu/{item_id}", response_model=MenuItem, responses=NOT_FOUND)
@limiter.limit(settings.api_rate_limit)
async def get_menu_item(
    request: Request, item_id: str, menu: MenuCollection = Depends(get_menu)
) -> MenuItem:
    return menu.find_by_id(_parse_item_id(item_id))


@app.post("/api/menu", status_code=201, response_model=MenuItem, responses=BAD_REQUEST)
@limiter.limit(settings.api_rate_limit)
async def create_menu_item(
    request: Request,
    payload: dict[str, Any] | None = Body(default=None),
    menu: MenuCollection = Depends(get_menu),
) -> MenuItem:
    return menu.insert(_require_body(payload))


@app.put(
    "/api/menu/{item_id}",
    response_model=MenuItem,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
@limiter.limit(settings.api_rate_limit)
async def update_menu_item(
    request: Request,
    item_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    menu: MenuCollection = Depends(get_menu),
) -> MenuItem:
    menu_id = _parse_item_id(item_id)
    menu.find_by_id(menu_id)
    return menu.replace(menu_id, _require_body(payload))


@app.delete("/api/menu/{item_id}", response_model=MenuItemDeleted, responses=NOT_FOUND)
@limiter.limit(settings.api_rate_limit)
async def delete_menu_item(
    request: Request, item_id: str, menu: MenuCollection = Depends(get_menu)
) -> MenuItemDeleted:
    deleted = menu.remove(_parse_item_id(item_id))
    return MenuItemDeleted(menuItem=deleted)


def run() -> None:
    logger.info("server_started", url=f"http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
