"""Merge and deduplicate scan records."""

import logging
from collections.abc import Iterable

from wifiviewer.scanner.base import WifiRecord, is_valid_bssid, normalize_bssid

logger = logging.getLogger(__name__)


def aggregate_records(records: Iterable[WifiRecord]) -> list[WifiRecord]:
    """Return records sorted by BSSID with one entry per BSSID.

    Invalid BSSIDs are dropped. When several records share a BSSID the
    first one encountered wins, even if a later one reports a stronger
    signal. The sort is stable, so "first" follows input order.
    """
    valid: list[WifiRecord] = []
    for record in records:
        if not is_valid_bssid(record.bssid):
            logger.debug("Dropping record with invalid BSSID %r", record.bssid)
            continue
        bssid = normalize_bssid(record.bssid)
        if bssid != record.bssid:
            record = WifiRecord(ssid=record.ssid, bssid=bssid, signal=record.signal)
        valid.append(record)

    valid.sort(key=lambda r: r.bssid)

    merged: list[WifiRecord] = []
    for record in valid:
        if merged and merged[-1].bssid == record.bssid:
            continue
        merged.append(record)
    return merged
