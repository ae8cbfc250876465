from __future__ import annotations

from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from walletlens.api.dependencies import build_context
from walletlens.api.error_handlers import register_error_handlers
from walletlens.api.routers.health import router as health_router
from walletlens.api.routers.insights import router as insights_router
from walletlens.api.routers.transactions import router as transactions_router
from walletlens.domain.ports.summary_writer import SummaryWriterPort
from walletlens.observability.logging import get_logger, setup_logging
from walletlens.observability.request_context import reset_request_id, set_request_id
from walletlens.settings import Settings, load_settings

API_PREFIX = "/api/v1"


def create_app(
    settings: Settings | None = None,
    *,
    writer: SummaryWriterPort | None = None,
) -> FastAPI:
    config = settings or load_settings()
    setup_logging(config)

    app = FastAPI(title="WalletLens API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.ctx = build_context(config, writer)

    logger = get_logger()

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        request_id = (
            str(request.headers.get("x-request-id", "") or "").strip()
            or uuid4().hex[:16]
        )
        token = set_request_id(request_id)
        started = perf_counter()
        req_logger = logger.bind(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - started) * 1000
            req_logger.bind(status_code=500).opt(exception=True).error(
                f"request failed duration_ms={duration_ms:.2f}"
            )
            reset_request_id(token)
            raise

        duration_ms = (perf_counter() - started) * 1000
        response.headers["X-Request-Id"] = request_id
        status_code = int(response.status_code)
        message = (
            f"{request.method} {request.url.path} "
            f"status={status_code} duration_ms={duration_ms:.2f}"
        )
        if status_code >= 500:
            req_logger.bind(status_code=status_code).error(message)
        elif status_code >= 400:
            req_logger.bind(status_code=status_code).warning(message)
        else:
            req_logger.bind(status_code=status_code).info(message)
        reset_request_id(token)
        return response

    register_error_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(insights_router, prefix=API_PREFIX)
    app.include_router(transactions_router, prefix=API_PREFIX)

    @app.api_route(
        f"{API_PREFIX}/{{rest:path}}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def api_not_found(rest: str) -> Response:
        raise HTTPException(status_code=404, detail=f"route not found: {API_PREFIX}/{rest}")

    return app


def serve(settings: Settings | None = None) -> None:
    config = settings or load_settings()
    setup_logging(config)
    app = create_app(config)
    get_logger().info(f"WalletLens API listening on http://{config.host}:{config.port}")
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        log_config=None,
    )


def main() -> None:
    serve(load_settings())


if __name__ == "__main__":
    main()
