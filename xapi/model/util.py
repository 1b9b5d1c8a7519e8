# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID


def freeze(obj: object, name: str) -> None:
    """Replaces a list field of a frozen dataclass with a tuple."""
    value = getattr(obj, name)
    if value is not None and not isinstance(value, tuple) and isinstance(value, Iterable) \
            and not isinstance(value, (str, bytes, dict)):
        object.__setattr__(obj, name, tuple(value))


def coerce_uuid(obj: object, name: str) -> None:
    """Turns a UUID given as string into a proper `UUID`.
    Malformed strings are left alone, so the validation reports them."""
    value: Any = getattr(obj, name)
    if isinstance(value, str):
        try:
            object.__setattr__(obj, name, UUID(value))
        except ValueError:
            pass
