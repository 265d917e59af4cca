"""FastAPI application for the agentic workflow optimizer."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentflow.errors import InvalidInputError, OptimizeError
from agentflow.llm import build_workflow_model
from agentflow.optimizer import WorkflowOptimizer
from server.logging_config import configure_logging
from server.optimize_routes import router as optimize_router
from server.settings import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the model client on shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "Workflow optimizer ready (provider=%s, model=%s)",
        settings.llm_provider,
        settings.llm_model,
    )
    if not settings.llm_api_key and app.state.owns_optimizer:
        logger.warning("No API key configured for %s; optimize requests will fail", settings.llm_provider)
    yield
    if app.state.owns_optimizer:
        await app.state.optimizer.aclose()


async def optimize_error_handler(request: Request, exc: OptimizeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request bodies count as invalid input."""
    logger.info("Rejected request body: %s", exc.errors())
    error = InvalidInputError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


def create_app(
    settings: Settings | None = None,
    optimizer: WorkflowOptimizer | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Server settings; read from the environment when omitted
        optimizer: Optimizer to serve; built from ``settings`` when omitted
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    owns_optimizer = optimizer is None
    if optimizer is None:
        model = build_workflow_model(
            settings.llm_provider,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
        )
        optimizer = WorkflowOptimizer(model, strict_integrity=settings.strict_integrity)

    app = FastAPI(
        title="Agentic Workflow Optimizer API",
        description="Redesigns business workflows as agentic AI pipelines",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.optimizer = optimizer
    app.state.owns_optimizer = owns_optimizer

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(OptimizeError, optimize_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # include routes
    app.include_router(optimize_router, prefix="/api")

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    print(f"Backend running on http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
