from contextlib import asynccontextmanager

from app.db.Connection import database
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings
from app.core.errors import CodeSpaceExhausted, InvalidPayload, PayloadTooLarge
from app.db.Models import models
from app.api import admin, links, qr_codes, shortener
from app.core.logging_config import configure_logging

logger = configure_logging()
logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")

models.Base.metadata.create_all(bind=database.engine)
logger.info("Database models initialized/checked.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    database.verify_database_connection()
    database.verify_redis_connection()
    yield
    logger.info("Shutting down gracefully...")
    try:
        database.engine.dispose()
    except Exception:
        logger.debug("Error disposing DB engine")
    if database.redis_client is not None:
        try:
            database.redis_client.close()
        except Exception:
            logger.debug("Error closing Redis client")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Short links and branded QR codes for URLs, contacts, WiFi, events and more",
    lifespan=lifespan,
)

app.include_router(links.router)
app.include_router(qr_codes.router)
app.include_router(admin.router)

@app.get("/health", tags=["health"])
def health_check():
    return {"status": "healthy", "service": "qr-links"}

# Catch-all redirect route goes last
app.include_router(shortener.router, prefix="")

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )

@app.exception_handler(InvalidPayload)
async def invalid_payload_handler(request: Request, exc: InvalidPayload):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

@app.exception_handler(PayloadTooLarge)
async def payload_too_large_handler(request: Request, exc: PayloadTooLarge):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

@app.exception_handler(CodeSpaceExhausted)
async def code_space_exhausted_handler(request: Request, exc: CodeSpaceExhausted):
    logger.error(f"Short code generation exhausted: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
