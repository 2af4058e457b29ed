"""Structured logging utilities."""

from .scan_log import (
    CLASS_FOUND,
    ENTRY_SKIPPED,
    SCOPE_FINISHED,
    SCOPE_STARTED,
    JsonlScanLogger,
    ScanEvent,
    collecting_sink,
    fan_out,
    jsonl_sink,
    utc_timestamp,
)

__all__ = [
    "CLASS_FOUND",
    "ENTRY_SKIPPED",
    "JsonlScanLogger",
    "SCOPE_FINISHED",
    "SCOPE_STARTED",
    "ScanEvent",
    "collecting_sink",
    "fan_out",
    "jsonl_sink",
    "utc_timestamp",
]
