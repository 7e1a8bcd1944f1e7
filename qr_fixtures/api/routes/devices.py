"""Device endpoints: create, list, refresh scan, and QR images.

Domain errors propagate to the handlers registered in ``fastapi_app``.
"""

from __future__ import annotations

import time
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Response, status

from observability.logging_config import get_logger
from qr_fixtures.api.dependencies import get_fixture_service
from qr_fixtures.api.schemas import (
    CreateDeviceRequest,
    DeviceResponse,
    ErrorResponse,
    ScanRefreshResponse,
)
from qr_fixtures.devices.models import Device
from qr_fixtures.devices.service import DeviceFixtureService

router = APIRouter(prefix="/api", tags=["devices"])
logger = get_logger("qr_fixtures.api")
_fixture_service_dep = Depends(get_fixture_service)

PNG_MEDIA_TYPE = "image/png"


def _require_device(service: DeviceFixtureService, device_id: str) -> Device:
    device = service.get(device_id)
    if device is None:
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")
    return device


@router.post(
    "/devices",
    response_model=DeviceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a simulated device with REGISTER and SCAN payloads",
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_device(
    payload: CreateDeviceRequest,
    service: DeviceFixtureService = _fixture_service_dep,
) -> DeviceResponse:
    start = time.perf_counter()
    device = await service.provision(payload.device_id)
    logger.info(
        "device_provisioned",
        extra={
            "device_id": device.device_id,
            "unique_code": device.unique_code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        },
    )
    return DeviceResponse.from_device(device)


@router.get("/devices", response_model=List[DeviceResponse], summary="List devices in this session")
async def list_devices(service: DeviceFixtureService = _fixture_service_dep) -> List[DeviceResponse]:
    return [DeviceResponse.from_device(device) for device in service.devices()]


@router.post(
    "/devices/{device_id}/scan/refresh",
    response_model=ScanRefreshResponse,
    summary="Issue a new unique code and re-encrypt the SCAN payload",
    responses={204: {"description": "Unknown device; nothing changed"}},
)
async def refresh_scan(
    device_id: str,
    service: DeviceFixtureService = _fixture_service_dep,
):
    encoded = await service.refresh(device_id)
    if encoded is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    device = _require_device(service, device_id)
    return ScanRefreshResponse(
        device_id=device.device_id,
        unique_code=device.unique_code,
        scan_payload=encoded,
    )


@router.get(
    "/devices/{device_id}/qr/{kind}.png",
    response_class=Response,
    summary="Render a device's REGISTER or SCAN QR code",
    responses={200: {"content": {PNG_MEDIA_TYPE: {}}}, 409: {"model": ErrorResponse}},
)
async def device_qr(
    device_id: str,
    kind: Literal["register", "scan"],
    service: DeviceFixtureService = _fixture_service_dep,
) -> Response:
    device = _require_device(service, device_id)
    if kind == "register":
        image = await service.render_register(device)
    else:
        image = await service.render_scan(device)
    return Response(content=image, media_type=PNG_MEDIA_TYPE)


@router.get(
    "/qr/invalid.png",
    response_class=Response,
    summary="Render a QR code the scanner must reject",
    responses={200: {"content": {PNG_MEDIA_TYPE: {}}}},
)
async def invalid_qr(service: DeviceFixtureService = _fixture_service_dep) -> Response:
    image = await service.render_invalid()
    return Response(content=image, media_type=PNG_MEDIA_TYPE)


__all__ = ["router"]
