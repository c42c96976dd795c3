from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from datetime import datetime, timezone
from typing import Optional
import logging

from app import config
from app.api.routes import router
from app.crud import StringStore
from app.exceptions import StringAnalyzerError

# Configure logging
config.configure_logging()
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "POST /strings": "Analyze and store a string",
    "GET /strings/{string_value}": "Get specific string analysis",
    "GET /strings": "Get all strings with optional filters",
    "GET /strings/filter-by-natural-language": "Filter using natural language",
    "DELETE /strings/{string_value}": "Delete a string",
}


async def string_analyzer_exception_handler(request: Request, exc: StringAnalyzerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        field = error['loc'][-1] if error['loc'] else "body"
        errors[str(field)] = error['msg']

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "details": errors
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    # If detail is already a dict with 'error' key, return as is
    if isinstance(exc.detail, dict) and 'error' in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)
    # Otherwise wrap it
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def create_app(store: Optional[StringStore] = None) -> FastAPI:
    """Build the API around a record store (a fresh in-memory one by default)."""
    app = FastAPI(
        title=config.APP_NAME,
        description="Analyze, store and filter string properties",
        version=config.APP_VERSION
    )
    app.state.store = store if store is not None else StringStore()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StringAnalyzerError, string_analyzer_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": f"{config.APP_NAME} is running",
            "version": config.APP_VERSION,
            "endpoints": ENDPOINTS,
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    app.include_router(router, tags=["strings"])

    logger.info(f"{config.APP_NAME} v{config.APP_VERSION} ready")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=config.HOST, port=config.PORT)
