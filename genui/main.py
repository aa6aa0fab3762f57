"""
genui API -- FastAPI application entry point.
Relays UI requests to the language model through the plan/code/explain pipeline.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from genui.config import config
from genui.errors import GenerationError, InvalidInputError
from genui.routes import components, generate
from genui.services.generate_service import GenerationPipeline
from genui.services.model_client import GeminiClient, ModelClient
from genui.utils.logger import logger


def _is_missing_message(exc: RequestValidationError) -> bool:
    """True when no body was sent at all, so there is no message either."""
    return any(
        err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",)
        for err in exc.errors()
    )


def create_app(model: Optional[ModelClient] = None, parallel_stages: Optional[bool] = None) -> FastAPI:
    """Build the app around a model client. Defaults to Gemini from config."""
    if model is None:
        model = GeminiClient.from_config(config)
    if parallel_stages is None:
        parallel_stages = config.PARALLEL_STAGES

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("genui API starting up...")
        if isinstance(model, GeminiClient) and not model.is_configured:
            logger.warning("GEMINI_API_KEY not set -- generation requests will fail with 503")
        logger.info(f"genui API ready (parallel_stages={parallel_stages}).")
        yield

        logger.info("genui API shutting down...")
        close = getattr(model, "close", None)
        if close is not None:
            try:
                await close()
            except Exception as e:
                logger.warning(f"Model client cleanup error: {e}")
        logger.info("genui API stopped.")

    app = FastAPI(
        title="genui API",
        description="Plans, generates and explains UI component trees with a language model.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.model = model
    app.state.pipeline = GenerationPipeline(model, parallel_stages=parallel_stages)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in config.CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(generate.router, tags=["generate"])
    app.include_router(components.router, tags=["components"])

    @app.get("/health")
    async def health():
        """Health check. Reports whether a model credential is configured."""
        configured = getattr(model, "is_configured", True)
        return {
            "status": "ok",
            "service": "genui-api",
            "version": "0.1.0",
            "dependencies": {
                "model": "configured" if configured else "unconfigured",
            },
        }

    @app.exception_handler(GenerationError)
    async def generation_exception_handler(request: Request, exc: GenerationError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if _is_missing_message(exc):
            return JSONResponse(status_code=400, content=InvalidInputError().to_response())
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request body",
                "error": "INVALID_REQUEST",
                "details": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "message": "Internal server error",
                "error": "INTERNAL_ERROR",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "genui.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
    )
