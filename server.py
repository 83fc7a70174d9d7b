"""
Search Console Datapoint Server - FastAPI Application

Exposes the Search Console module's datapoints over HTTP.

Business logic is delegated to the datapoints module - this file only handles:
- API routing
- Mapping datapoint failures to HTTP errors
- Middleware configuration
- Health checks
"""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from config import config
from datapoints.base import DatapointError
from datapoints.module import SearchConsoleModule
from datapoints.schemas import DatapointPayload, HealthResponse, PostDataResponse

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Validates configuration on startup.
    """
    logger.info("Starting Search Console datapoint server...")

    for warning in config.validate():
        logger.warning(f"Config warning: {warning}")

    logger.info(f"Storage backend: {config.storage.backend}")
    logger.info(f"Debug mode: {config.server.debug}")

    yield

    logger.info("Shutting down Search Console datapoint server...")


app = FastAPI(
    title="Site Kit Search Console",
    description="Search Console datapoints for the site dashboard",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_module() -> SearchConsoleModule:
    """Process-wide module instance, built from configuration on first use."""
    return SearchConsoleModule.from_config(config)


def _respond(result: Any) -> Any:
    if isinstance(result, DatapointError):
        logger.warning(f"Datapoint failed: {result.code} ({result.status})")
        raise HTTPException(
            status_code=result.status,
            detail={"code": result.code, "message": result.message}
        )
    return result


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        module=SearchConsoleModule.SLUG
    )


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Site Kit Search Console",
        "version": API_VERSION,
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


@app.get("/modules/search-console/data/{datapoint}", tags=["Datapoints"])
def get_datapoint(
    datapoint: str,
    request: Request,
    module: SearchConsoleModule = Depends(get_module)
) -> Any:
    """Read a datapoint. Query parameters are passed as datapoint params."""
    params = dict(request.query_params)
    logger.info(f"GET datapoint {datapoint} params={sorted(params)}")
    return _respond(module.get_data("GET", datapoint, params))


@app.post("/modules/search-console/data/{datapoint}", tags=["Datapoints"])
def set_datapoint(
    datapoint: str,
    payload: DatapointPayload,
    module: SearchConsoleModule = Depends(get_module)
) -> Any:
    """Write a datapoint with the JSON body's `data` as params."""
    logger.info(f"POST datapoint {datapoint}")
    return _respond(module.get_data("POST", datapoint, payload.data))


@app.get(
    "/modules/search-console/posts/{post_id}/has-data",
    response_model=PostDataResponse,
    tags=["Datapoints"]
)
def post_has_data(
    post_id: int,
    module: SearchConsoleModule = Depends(get_module)
) -> PostDataResponse:
    """Whether Search Console has recent data for a post (cached for two hours)."""
    return PostDataResponse(postId=post_id, hasData=module.has_data_for_post(post_id))


@app.get("/modules/search-console/info", tags=["System"])
def module_info(module: SearchConsoleModule = Depends(get_module)) -> dict[str, Any]:
    """Module description, scopes and setup state."""
    return {
        **module.get_info(),
        "scopes": module.get_scopes(),
        "datapoints": module.get_datapoints(),
        "setupComplete": module.is_setup_complete(),
        **module.get_setup_data(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
