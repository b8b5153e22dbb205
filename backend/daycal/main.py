from __future__ import annotations

from functools import lru_cache
from typing import Any
import uuid

from fastapi import Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from .config import Settings, get_settings
from .errors import DataSourceUnavailable, InvalidEvent, InvalidInput
from .log import configure_logging, get_logger
from .models import DayView, ErrorResponse, HealthResponse, LayoutResult
from .render import render_day_html
from .service import CalendarService

logger = get_logger(__name__)


@lru_cache
def get_service() -> CalendarService:
    settings = get_settings()
    return CalendarService(settings=settings)


def _error_response(request: Request, status_code: int, detail: str) -> JSONResponse:
    payload = ErrorResponse(detail=detail, request_id=getattr(request.state, "request_id", None))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def create_app() -> FastAPI:
    settings: Settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Day Calendar API",
        version="1.0.0",
        description="Overlap-aware layout of a single day's events.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        return _error_response(request, 422, str(exc))

    @app.exception_handler(InvalidEvent)
    async def invalid_event_handler(request: Request, exc: InvalidEvent):
        return _error_response(request, 422, str(exc))

    @app.exception_handler(DataSourceUnavailable)
    async def data_source_exception_handler(request: Request, exc: DataSourceUnavailable):
        logger.warning("Events source unavailable: %s", exc)
        return _error_response(request, 503, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return _error_response(request, 500, "Internal server error.")

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Day Calendar API", "docs": "/docs"}

    @app.get("/api/v1/health", response_model=HealthResponse)
    def health(service: CalendarService = Depends(get_service)) -> HealthResponse:
        return service.health()

    @app.get("/api/v1/day", response_model=DayView)
    def day(service: CalendarService = Depends(get_service)) -> DayView:
        return service.day_view()

    @app.get("/api/v1/day.html", response_class=HTMLResponse)
    def day_html(service: CalendarService = Depends(get_service)) -> HTMLResponse:
        return HTMLResponse(render_day_html(service.day_view(), include_styles=True))

    @app.post("/api/v1/day", response_model=DayView)
    def day_from_events(
        events: Any = Body(default=None),
        service: CalendarService = Depends(get_service),
    ) -> DayView:
        return service.day_view_for(events)

    @app.post("/api/v1/layout", response_model=list[LayoutResult])
    def layout(
        events: Any = Body(default=None),
        service: CalendarService = Depends(get_service),
    ) -> list[LayoutResult]:
        return service.layout(events)

    return app


app = create_app()
