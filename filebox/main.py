from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from filebox.api.v1.router import router as v1_router
from filebox.exceptions import ServiceError
from filebox.logging_config import setup_logging
from filebox.schemas.common import ErrorResponse

app = FastAPI(title="Filebox API")

app.include_router(v1_router, prefix="/api/v1")

# Setup application logging
logger = setup_logging()


@app.get("/api/v1/health", tags=["health"])
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Unwrap the 'detail' field from HTTPException responses."""
    content = exc.detail

    if isinstance(content, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=exc.headers,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": "Unauthorized" if exc.status_code == 401 else "Error",
            "message": content,
        },
        headers=exc.headers,
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """Render failures reported by the services with their own status code."""
    if exc.status_code >= 500:
        logger.error(
            f"Service failure: {exc.__class__.__name__}: {exc.message}",
            extra={"path": request.url.path, "method": request.method},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, message=exc.message).model_dump(),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    # Full stack trace goes to the log, never to the client
    logger.error(
        f"Unhandled exception: {exc.__class__.__name__}: {str(exc)}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
        },
    )
