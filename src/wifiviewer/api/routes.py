"""REST API endpoints."""

import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from wifiviewer.config import load_config
from wifiviewer.scanner.chain import discover
from wifiviewer.scanner.diagnostics import DiagnosticEntry, ScanDiagnostic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# Request models
class ScanRequest(BaseModel):
    building: str
    room: str


# Response models
class RecordOut(BaseModel):
    ssid: str
    bssid: str
    signal: str


class DiagnosticEntryOut(BaseModel):
    adapter_name: str
    applicable: bool
    invoked: bool
    exit_succeeded: bool
    output_excerpt: str
    error_excerpt: str
    notes: list[str]
    timed_out: bool
    cancelled: bool

    @classmethod
    def from_entry(cls, entry: DiagnosticEntry) -> "DiagnosticEntryOut":
        return cls(**vars(entry))


class DiagnosticOut(BaseModel):
    message: str
    hints: list[str]
    cancelled: bool
    entries: list[DiagnosticEntryOut]
    lines: list[str]


class ScanResponse(BaseModel):
    status: Literal["ok", "no_data"]
    building: str
    room: str
    adapter: str | None = None
    records: list[RecordOut] = []
    diagnostic: DiagnosticOut | None = None


@router.post("/bssids")
async def scan_bssids(body: ScanRequest) -> ScanResponse:
    # Location context is recorded for audit only; it does not affect the scan
    logger.info("Scan requested: building=%s room=%s", body.building, body.room)
    result = await discover((body.building, body.room), settings=load_config())

    if isinstance(result, ScanDiagnostic):
        return ScanResponse(
            status="no_data",
            building=body.building,
            room=body.room,
            diagnostic=DiagnosticOut(
                message=result.message,
                hints=result.hints,
                cancelled=result.cancelled,
                entries=[DiagnosticEntryOut.from_entry(e) for e in result.entries],
                lines=result.to_lines(),
            ),
        )

    return ScanResponse(
        status="ok",
        building=body.building,
        room=body.room,
        adapter=result.adapter_name,
        records=[RecordOut(ssid=r.ssid, bssid=r.bssid, signal=r.signal) for r in result.records],
    )
