"""CLI for generating smart-bin QR fixtures."""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError as SettingsValidationError
from rich.console import Console
from rich.table import Table

from config.settings import FixtureSettings, get_fixture_settings
from observability.logging_config import configure_logging
from qr_fixtures.common.exceptions import EncryptionError, ValidationError
from qr_fixtures.devices.adapters import AesCbcCipherAdapter
from qr_fixtures.devices.models import Device
from qr_fixtures.devices.service import DeviceFixtureService

app = typer.Typer(help="Smart-bin QR fixture generator")
console = Console()

TOKENS_ARGUMENT = typer.Argument(None, help="Device id tokens: AUTO, 0-999, or custom text")

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]")


def _load_settings() -> FixtureSettings:
    try:
        return get_fixture_settings()
    except SettingsValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc


def _safe_filename(device_id: str) -> str:
    return _UNSAFE_FILENAME.sub("_", device_id)


def _file_stems(devices: List[Device]) -> dict[str, str]:
    """Map device ids to distinct filename stems.

    Ids that sanitise to the same stem (``A/B`` and ``A_B``) get the device
    index appended instead of overwriting each other.
    """
    stems: dict[str, str] = {}
    taken: set[str] = set()
    for device in devices:
        stem = _safe_filename(device.device_id)
        if stem in taken:
            stem = f"{stem}-{device.index}"
        while stem in taken:
            stem += "_"
        taken.add(stem)
        stems[device.device_id] = stem
    return stems


async def _run_session(
    service: DeviceFixtureService,
    tokens: List[str],
    refresh: int,
    out: Optional[Path],
) -> List[Device]:
    devices = [await service.provision(token) for token in tokens]
    for device in devices:
        for _ in range(refresh):
            await service.refresh(device.device_id)

    if out is not None:
        out.mkdir(parents=True, exist_ok=True)
        stems = _file_stems(devices)
        for device in devices:
            stem = stems[device.device_id]
            (out / f"{stem}-register.png").write_bytes(await service.render_register(device))
            (out / f"{stem}-scan.png").write_bytes(await service.render_scan(device))
        (out / "invalid.png").write_bytes(await service.render_invalid())
    return devices


@app.command("generate")
def generate(
    tokens: Optional[List[str]] = TOKENS_ARGUMENT,
    refresh: int = typer.Option(0, "--refresh", min=0, help="Refresh each SCAN payload N times"),
    out: Optional[Path] = typer.Option(None, "--out", help="Directory for PNG QR codes"),
    json_output: bool = typer.Option(False, "--json", help="Emit one JSON object per device"),
) -> None:
    """Create devices in a fresh in-memory session and print their payloads."""
    settings = _load_settings()
    configure_logging(settings.log_level, structured=False)
    service = DeviceFixtureService.from_settings(settings)

    try:
        devices = asyncio.run(_run_session(service, tokens or ["AUTO"], refresh, out))
    except ValidationError as exc:
        console.print(f"[red]Rejected device id:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    except EncryptionError as exc:
        console.print(f"[red]Encryption failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if json_output:
        for device in devices:
            typer.echo(
                json.dumps(
                    {
                        "index": device.index,
                        "device_id": device.device_id,
                        "unique_code": device.unique_code,
                        "register_payload": device.register_json,
                        "scan_payload": device.encoded_scan,
                    }
                )
            )
        return

    _print_devices(devices)
    if out is not None:
        console.print(f"Wrote {len(devices) * 2 + 1} QR codes to: {out}")


@app.command("decode")
def decode(
    encoded: str = typer.Argument(..., help="base64 SCAN payload as read from the QR code"),
) -> None:
    """Decrypt a SCAN payload with the configured key (receiving-side check)."""
    settings = _load_settings()
    try:
        plaintext = AesCbcCipherAdapter(settings.key_bytes()).decode(encoded)
    except EncryptionError as exc:
        console.print(f"[red]Could not decode payload:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(plaintext)


def _print_devices(devices: List[Device]) -> None:
    table = Table(title="Simulated devices", show_lines=False)
    table.add_column("#", style="cyan")
    table.add_column("Device ID")
    table.add_column("Unique code")
    table.add_column("Register (plain JSON)")
    table.add_column("Scan (encrypted)")
    for device in devices:
        table.add_row(
            str(device.index),
            device.device_id,
            str(device.unique_code),
            device.register_json,
            device.encoded_scan or "-",
        )
    console.print(table)


def main() -> None:  # pragma: no cover - CLI entry point
    app()


if __name__ == "__main__":  # pragma: no cover - CLI
    main()
