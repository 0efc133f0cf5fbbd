"""FastAPI application entry point."""

from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from study_assistant import __version__
from study_assistant.config import get_settings
from study_assistant.core.exceptions import StudyAssistantError
from study_assistant.core.logging import get_logger, setup_logging, LogEvents
from study_assistant.handlers.canvas_handler import CanvasHandler
from study_assistant.handlers.chat_handler import ChatHandler
from study_assistant.handlers.study_pack_handler import StudyPackHandler
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.conversation_service import ConversationService
from study_assistant.services.study_pack_service import StudyPackService
from study_assistant.services.tool_executor import ToolExecutor
from study_assistant.tools.registry import build_default_registry

# Initialize logging early
setup_logging()
logger = get_logger("main")


class AppState:
    """Application state container."""

    tool_executor: ToolExecutor
    conversation_service: ConversationService
    study_pack_service: StudyPackService
    chat_handler: ChatHandler
    study_pack_handler: StudyPackHandler
    canvas_handler: CanvasHandler


app_state = AppState()


def init_app_state(
    conversation_service: ConversationService | None = None,
    canvas_factory: Callable[[str], CanvasClient] = CanvasClient,
) -> AppState:
    """Wire services and handlers into the shared app state."""
    settings = get_settings()

    if conversation_service is None:
        registry = build_default_registry(max_content_chars=settings.tool_content_max_chars)
        conversation_service = ConversationService(tool_executor=ToolExecutor(registry))

    app_state.tool_executor = conversation_service.tool_executor
    app_state.conversation_service = conversation_service
    app_state.study_pack_service = StudyPackService(conversation_service)
    app_state.chat_handler = ChatHandler(conversation_service, canvas_factory)
    app_state.study_pack_handler = StudyPackHandler(app_state.study_pack_service, canvas_factory)
    app_state.canvas_handler = CanvasHandler(canvas_factory)
    return app_state


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(
        LogEvents.APP_STARTING,
        version=__version__,
        environment=settings.app_env.value,
        debug=settings.debug,
    )

    init_app_state()

    logger.info(
        LogEvents.APP_STARTED,
        provider=settings.llm_provider.value,
        available_providers=[p.value for p in settings.get_available_providers()],
        tools=app_state.tool_executor.registry.names,
        max_tool_steps=app_state.conversation_service.max_steps,
    )

    yield

    logger.info(LogEvents.APP_SHUTDOWN)


app = FastAPI(
    title="Canvas Study Assistant",
    description="Chat assistant that studies Canvas course content with students",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Routes
@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint - basic info."""
    return {
        "name": "Canvas Study Assistant",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    settings = get_settings()

    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.app_env.value,
        "providers": {
            "available": [p.value for p in settings.get_available_providers()],
            "default": settings.llm_provider.value,
        },
        "tools": {
            "count": len(app_state.tool_executor.registry),
            "max_steps": app_state.conversation_service.max_steps,
        },
    }


@app.post("/api/chat")
async def chat(request: Request) -> Response:
    """Chat with the study assistant (JSON or Server-Sent Events)."""
    return await app_state.chat_handler.handle(request)


@app.post("/api/study-pack")
async def study_pack(request: Request) -> Response:
    """Generate a study guide for one course."""
    return await app_state.study_pack_handler.handle(request)


@app.get("/api/canvas/{resource}")
async def canvas_proxy(resource: str, request: Request) -> Response:
    """Browse courses, modules, assignments, pages, quizzes and files."""
    return await app_state.canvas_handler.handle(resource, request)


@app.exception_handler(StudyAssistantError)
async def app_exception_handler(request: Request, exc: StudyAssistantError) -> JSONResponse:
    """Application errors that escaped their handler."""
    logger.error(
        "application_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


# Development entry point
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "study_assistant.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
