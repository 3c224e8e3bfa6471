import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from passguard.app.api.v1.router import api_router
from passguard.app.core.config import settings
from passguard.app.core.errors import StorageError
from passguard.app.core.logging import configure_logging
from passguard.app.db.base import init_models
from passguard.app.security.encryption import VaultCipher

logger = logging.getLogger(__name__)


# --- LIFESPAN: derive the vault key and create tables at startup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)

    # Raises ConfigurationError without ENCRYPTION_KEY, so a misconfigured
    # server never starts instead of failing on the first request
    app.state.cipher = VaultCipher.from_secret(settings.ENCRYPTION_KEY)

    await init_models()
    logger.info("%s API started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(StorageError)
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: Exception):
    # Details stay in the server log
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(api_router, prefix=settings.API_V1_STR)


@app.api_route(
    f"{settings.API_V1_STR}/{{path:path}}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def api_not_found(path: str):
    return JSONResponse(
        status_code=404,
        content={"success": False, "message": "API endpoint not found"},
    )


@app.get("/")
def root():
    return {"message": "Welcome to PassGuard API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
