"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wealth_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wealth_gateway.api.v1 import goals, net_worth, recurring, salary
from wealth_gateway.infrastructure.observability.logging import setup_logging
from wealth_gateway.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Wealth Gateway",
        description="Net worth projection, goal planning, recurring obligation and salary credit service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(net_worth.router, prefix="/v1", tags=["net-worth"])
    app.include_router(recurring.router, prefix="/v1", tags=["recurring"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(salary.router, prefix="/v1", tags=["salary"])

    return app


app = create_app()
