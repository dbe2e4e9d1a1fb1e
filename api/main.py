import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import db, settings
from core.log import configure_logging
from rest import router as rest_router
from rest import schemas as rest_schemas
from rest.errors import RestError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = rest_schemas.ErrorResponse(error=message).model_dump()
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RestError)
async def rest_error_handler(_: Request, exc: RestError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Same envelope for framework-level errors (unknown route, etc.).
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never return stack traces to clients.
    logger.exception("unhandled_error path=%s", request.url.path, exc_info=exc)
    return _error_response(500, "Internal Server Error")


app.include_router(rest_router.router, prefix=f"/{settings.mount_prefix()}", tags=["rest"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "rest-sql-gateway api"}
