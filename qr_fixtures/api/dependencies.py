"""Dependency injection factories for API endpoints."""

from __future__ import annotations

from fastapi import Request

from qr_fixtures.devices.service import DeviceFixtureService


def get_fixture_service(request: Request) -> DeviceFixtureService:
    """Return the session-wide service created in the app lifespan."""
    service = getattr(request.app.state, "fixture_service", None)
    if service is None:
        raise RuntimeError("Fixture service is not initialised; is the lifespan running?")
    return service


__all__ = ["get_fixture_service"]
