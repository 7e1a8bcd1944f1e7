"""FastAPI application wiring for the QR fixture generator.

One process holds one in-memory session: a single ``DeviceFixtureService``
created in the lifespan and shared by every request.

Run with ``uvicorn qr_fixtures.api.fastapi_app:app``.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import FixtureSettings, get_fixture_settings
from observability.logging_config import configure_logging, get_logger
from qr_fixtures import __version__
from qr_fixtures.common.exceptions import (
    DuplicateDeviceError,
    EncryptionError,
    ScanNotEncodedError,
    ValidationError,
)
from qr_fixtures.devices.service import DeviceFixtureService


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


# Prefer explicitly-exported environment variables over values in `.env`.
# Tests can opt out by setting `FIXTURES_SKIP_DOTENV=1`.
if not _truthy_env("FIXTURES_SKIP_DOTENV"):
    try:
        load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env", override=False)
    except OSError as e:
        logging.getLogger(__name__).warning(
            "Failed to load .env via python-dotenv (%s); proceeding with OS env only",
            type(e).__name__,
        )

logger = get_logger("qr_fixtures.app")

from qr_fixtures.api.routes.devices import router as devices_router  # noqa: E402


def _error(status_code: int, error_code: str, message: str, device_id: str | None = None) -> JSONResponse:
    content = {"status": "error", "error_code": error_code, "message": message}
    if device_id is not None:
        content["device_id"] = device_id
    return JSONResponse(status_code=status_code, content=content)


def create_app(settings: FixtureSettings | None = None) -> FastAPI:
    """Build the API. Settings are resolved from the environment when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved = settings or get_fixture_settings()
        configure_logging(resolved.log_level, structured=resolved.structured_logs)

        app.state.cpu_executor = ThreadPoolExecutor(max_workers=resolved.cpu_workers)
        app.state.fixture_service = DeviceFixtureService.from_settings(
            resolved, executor=app.state.cpu_executor
        )
        logger.info(
            "fixture_session_started",
            extra={
                "device_prefix": resolved.device_prefix,
                "next_unique_code": app.state.fixture_service.registry.next_unique_code,
            },
        )

        yield  # Application runs

        cpu_executor = getattr(app.state, "cpu_executor", None)
        if cpu_executor is not None:
            cpu_executor.shutdown(wait=False, cancel_futures=True)

    app = FastAPI(
        title="Smart-bin QR Fixture API",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(DuplicateDeviceError)
    async def _duplicate_handler(request: Request, exc: DuplicateDeviceError) -> JSONResponse:
        logger.warning("duplicate_device_id", extra={"device_id": exc.device_id})
        return _error(409, "DUPLICATE_DEVICE_ID", str(exc), exc.device_id)

    @app.exception_handler(ValidationError)
    async def _validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("invalid_device_id", extra={"token": exc.token, "error": str(exc)})
        return _error(422, "INVALID_DEVICE_ID", str(exc))

    @app.exception_handler(ScanNotEncodedError)
    async def _not_encoded_handler(request: Request, exc: ScanNotEncodedError) -> JSONResponse:
        return _error(409, "SCAN_NOT_ENCODED", str(exc), exc.device_id)

    @app.exception_handler(EncryptionError)
    async def _encryption_handler(request: Request, exc: EncryptionError) -> JSONResponse:
        # Counters stay advanced; the operator recovers with a scan refresh.
        return _error(500, "ENCRYPTION_FAILED", str(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(devices_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
