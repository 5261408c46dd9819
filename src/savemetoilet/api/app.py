from __future__ import annotations

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from savemetoilet import __version__
from savemetoilet.api.dependencies import get_fetch_exporter, get_fetch_metrics
from savemetoilet.api.errors import ApiError
from savemetoilet.api.response import error_response
from savemetoilet.api.routers.health import router as health_router
from savemetoilet.api.routers.toilets import router as toilets_router
from savemetoilet.core.metrics import InMemoryFetchMetricsCollector
from savemetoilet.core.prometheus_exporter import FetchPrometheusExporter
from savemetoilet.observability import configure_access_log_filter, configure_otel, quiet_http_client_logs


def create_app() -> FastAPI:
    app = FastAPI(title="SaveMeToilet API", version=__version__)
    configure_otel(service_name="savemetoilet-backend")
    configure_access_log_filter()
    quiet_http_client_logs()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.include_router(health_router)
    app.include_router(toilets_router)

    @app.get("/metrics")
    async def metrics(
        collector: InMemoryFetchMetricsCollector = Depends(get_fetch_metrics),
        exporter: FetchPrometheusExporter = Depends(get_fetch_exporter),
    ) -> Response:
        return Response(content=exporter.render(collector), media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.message))

    return app


app = create_app()
