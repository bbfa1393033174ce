"""
FastAPI application mirroring the MCP tools over HTTP.

Endpoints:
- ``GET /`` service info
- ``GET /health``, ``GET /health/live`` health checks
- ``GET /metrics`` Prometheus exposition
- ``GET /api/v1/tools`` tool catalogue
- ``POST /api/v1/tools/{name}`` run a tool with a JSON argument object
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError

from blockscout_mcp import __version__
from blockscout_mcp.api.errors import (
    DecodeFailed,
    RequestFailed,
    UpstreamUnavailable,
)
from blockscout_mcp.api_server.models import (
    ErrorResponse,
    ToolCallResponse,
    ToolInfo,
    ToolListResponse,
)
from blockscout_mcp.api_server.monitoring import (
    health_checker,
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)
from blockscout_mcp.tools import OnChainData
from blockscout_mcp.utils.logger import get_logger

logger = get_logger(__name__)

APP_NAME = "Blockscout MCP API"


def create_app(tools: Optional[OnChainData] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        tools (Optional[OnChainData]): Tool catalogue. A default one is created at startup
            when omitted.

    Returns:
        FastAPI: The application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {APP_NAME}")
        app.state.tools = tools if tools is not None else OnChainData()
        health_checker.set_chain_cache(app.state.tools.api.cache)
        try:
            yield
        finally:
            await app.state.tools.api.aclose()
            logger.info(f"{APP_NAME} stopped")

    app = FastAPI(
        title=APP_NAME,
        description="Blockscout explorer API exposed as tools",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def track_requests(request: Request, call_next):
        """Track HTTP requests with Prometheus metrics."""
        method = request.method
        path = request.url.path

        http_requests_in_progress.labels(method=method, endpoint=path).inc()
        start_time = time.time()
        try:
            response = await call_next(request)

            # label by route template so tool names do not explode cardinality
            route = request.scope.get("route")
            endpoint = getattr(route, "path", path)
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(time.time() - start_time)

            return response
        finally:
            http_requests_in_progress.labels(method=method, endpoint=path).dec()

    @app.get("/", tags=["Info"])
    async def root():
        return {
            "name": APP_NAME,
            "version": __version__,
            "status": "running",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Comprehensive health check endpoint."""
        health_status = health_checker.check_health()

        if health_status['status'] == 'unhealthy':
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=health_status
            )

        return health_status

    @app.get("/health/live", tags=["Health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return health_checker.check_liveness()

    @app.get("/metrics", tags=["Monitoring"])
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/api/v1/tools", response_model=ToolListResponse, tags=["Tools"])
    async def list_tools(request: Request):
        tool_list = [ToolInfo(**tool) for tool in request.app.state.tools.list_tools()]
        return ToolListResponse(tools=tool_list, total=len(tool_list))

    @app.post(
        "/api/v1/tools/{name}",
        response_model=ToolCallResponse,
        responses={
            404: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
            503: {"model": ErrorResponse},
        },
        tags=["Tools"],
    )
    async def call_tool(name: str, request: Request,
                        arguments: Optional[Dict[str, Any]] = Body(default=None)):
        """
        Runs a tool.

        The body is the tool's argument object; the explorer's JSON response is
        returned unchanged under ``result``.
        """
        tools = request.app.state.tools
        if not tools.has_tool(name):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown tool: {name}")

        try:
            result = await tools.call_tool(name, arguments or {})
        except ValidationError as err:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=err.errors(include_url=False),
            )
        except UpstreamUnavailable as err:
            return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "upstream_unavailable", err)
        except RequestFailed as err:
            return _error_response(status.HTTP_502_BAD_GATEWAY, "request_failed", err,
                                   upstream_status=err.status_code)
        except DecodeFailed as err:
            return _error_response(status.HTTP_502_BAD_GATEWAY, "decode_failed", err)

        return ToolCallResponse(tool=name, result=result)

    return app


def _error_response(status_code: int, error: str, err: Exception,
                    upstream_status: Optional[int] = None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=str(err), status_code=upstream_status)
    return JSONResponse(status_code=status_code, content=body.model_dump())


app = create_app()
