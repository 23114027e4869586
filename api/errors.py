"""
API Error Handling

Every error leaves the API as {"error": ...}:
- HTTPException      -> {"error": detail} (a dict detail is sent as is)
- ValueError         -> 400
- IntegrityError     -> 409 for unique violations, 400 otherwise
- anything else      -> 500 {"error": "Internal Server Error", "details": {...}}
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger


def error_body(detail) -> dict:
    if isinstance(detail, dict):
        return detail
    return {"error": detail}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.detail), headers=exc.headers)


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique violations are conflicts; NOT NULL and foreign key failures are bad input."""
    logger.warning(f"{request.method} {request.url.path} violated a constraint: {exc.orig}")
    if "UNIQUE" in str(exc.orig).upper():
        return JSONResponse(status_code=409, content={"error": "A record with these values already exists."})
    return JSONResponse(status_code=400, content={"error": "The request violates a database constraint."})


async def catch_unhandled_errors(request: Request, call_next):
    """Middleware turning uncaught exceptions into the JSON 500 body."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "details": {"message": str(e)}},
        )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.middleware("http")(catch_unhandled_errors)
