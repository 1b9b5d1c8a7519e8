# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from xapi.errors import Violation
from xapi.model.util import freeze
from xapi.validator import ensure_valid


@dataclass(slots=True, frozen=True)
class About:
    """What an LRS tells about itself."""

    version: tuple[str, ...]
    """xAPI versions the LRS supports, e.g. `("1.0.0", "1.0.3")`."""
    extensions: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        freeze(self, "version")
        reasons = []
        if not self.version:
            reasons.append(Violation("version", "must not be empty"))
        ensure_valid(self, reasons)

    def supports(self, version: str) -> bool:
        return version in self.version
