# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import orjson

from xapi.errors import DecodeError, SerializerError

_fraction_pattern = re.compile(r"T\d{2}:?\d{2}:?\d{2}(?:[.,](\d+))?")


def _orjson_manual_type_mapper(value) -> Any:
    if isinstance(value, set):
        value = list(value)
        value.sort()
        return value
    raise TypeError


def json_serialize(obj, pretty: bool = False) -> str:
    option = orjson.OPT_NAIVE_UTC
    if pretty:
        option |= orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE
    try:
        # pylint: disable=no-member
        serialized = orjson.dumps(obj, default=_orjson_manual_type_mapper, option=option).decode("utf-8")
    except Exception as err:
        raise SerializerError(f"failed to serialize JSON: {err}") from err
    return serialized


def json_deserialize(serialized: str | bytes, path: str = "") -> Any:
    try:
        # pylint: disable=no-member
        return orjson.loads(serialized)
    except orjson.JSONDecodeError as err:
        raise DecodeError(f"invalid JSON: {err}", path) from err


class ParsedTimestamp(datetime):
    """A timestamp read from JSON.
    Remembers the precision it was written with, so it is written back unchanged."""

    timespec = "auto"


def format_timestamp(value: datetime) -> str:
    """ISO 8601 with `Z` for UTC; the precision read from JSON, else the shortest fitting one.
    Naive datetimes are taken to be UTC."""
    if isinstance(value, ParsedTimestamp):
        timespec = value.timespec
    elif value.microsecond == 0:
        timespec = "seconds"
    elif value.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    formatted = value.isoformat(timespec=timespec)
    if formatted.endswith("+00:00"):
        formatted = formatted[:-len("+00:00")] + "Z"
    return formatted


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    match = _fraction_pattern.search(value)
    digits = len(match.group(1) or "") if match else 0
    timestamp = ParsedTimestamp(parsed.year, parsed.month, parsed.day, parsed.hour, parsed.minute, parsed.second,
                                parsed.microsecond, parsed.tzinfo)
    if digits == 0:
        timestamp.timespec = "seconds"
    elif digits <= 3:
        timestamp.timespec = "milliseconds"
    else:
        timestamp.timespec = "microseconds"
    return timestamp


def format_uuid(value: UUID) -> str:
    return str(value)
