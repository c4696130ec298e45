"""
FastAPI application - Main entry point

Run with:
  uvicorn src.api.main:app --host 0.0.0.0 --port 8080
or:
  python -m src.api.main
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from src.api.endpoints.bank_connect import bank_connect_api
from src.database.events import InMemoryEventStore
from src.database.events_file import FileEventStore
from src.error_handler import ErrorHandler
from src.integrations.clients.mocks.connection_simulator import ConnectionSimulator
from src.integrations.contracts.bank_connect import ErrorKind, error_body
from src.integrations.contracts.interfaces import EventStore
from src.utils.config_loader import AppConfig, load_app_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

error_handler = ErrorHandler()


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def _resolve_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


def build_event_store(config: AppConfig) -> EventStore:
    """Pick exactly one event log strategy for the process."""
    if config.event_store == "memory":
        logger.info("Event log: in-memory ring buffer (capacity=%d)", config.memory_capacity)
        return InMemoryEventStore(capacity=config.memory_capacity)

    log_dir = _resolve_path(config.log_dir)
    logger.info("Event log: daily JSON-lines files under %s", log_dir)
    return FileEventStore(log_dir)


def create_app(
    config: Optional[AppConfig] = None,
    event_store: Optional[EventStore] = None,
    simulator: Optional[ConnectionSimulator] = None,
) -> FastAPI:
    config = config or load_app_config()
    if simulator is not None:
        event_store = simulator.event_store
    event_store = event_store or build_event_store(config)
    simulator = simulator or ConnectionSimulator(
        event_store=event_store,
        timeout_delay_seconds=config.timeout_delay_seconds,
    )

    app = FastAPI(
        title="Quantum Pay API",
        description="Mock pay-by-bank backend: bank list, simulated connections and a live event feed",
        version="1.0.0",
    )
    app.state.config = config
    app.state.event_store = event_store
    app.state.simulator = simulator

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    _register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "healthy",
            "event_store": app.state.event_store.kind,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(bank_connect_api, prefix="/api")

    # Must be registered last: it catches every unmatched GET.
    _register_client_routes(app, _resolve_path(config.client_build_dir))
    return app


# ============================================================================
# ERROR HANDLING
# ============================================================================

def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ErrorKind.INVALID_REQUEST, "Request body or parameters are invalid."),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        payload = error_handler.handle_exception(exc, context={"path": request.url.path, "method": request.method})
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


# ============================================================================
# CLIENT BUNDLE
# ============================================================================

def _register_client_routes(app: FastAPI, build_dir: Path) -> None:
    """Serve the prebuilt single-page client, falling back to index.html."""
    root = build_dir.resolve()
    if not root.is_dir():
        logger.warning("Client build directory not found, static serving disabled: %s", root)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def client_app(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "not_found", "message": f"No API route for /{full_path}"},
            )

        if full_path:
            candidate = (root / full_path).resolve()
            if candidate.is_file() and root in candidate.parents:
                return FileResponse(candidate)

        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)

        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "not_found", "message": "Client bundle is not built."},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.config.port)
