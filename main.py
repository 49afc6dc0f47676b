import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    location = ".".join(str(part) for part in errors[0].get("loc", ())) if errors else ""
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.error("Invalid request to %s: %s", request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Upload a resume PDF and ask questions about it",
        version="1.0.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    @application.on_event("startup")
    async def startup_event():
        logger.info(
            "Server running on %s:%s (vector backend: %s, chat model: %s)",
            settings.host, settings.port, settings.VECTOR_BACKEND, settings.CHAT_MODEL,
        )
        logger.info("Allowed CORS origins: %s", ", ".join(settings.cors_allow_origins))

    # Routers are imported lazily to avoid circular deps during app creation
    from routers.health import router as health_router
    from routers.resume import router as resume_router

    application.include_router(resume_router, tags=["resume"])
    application.include_router(health_router, tags=["health"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port)
