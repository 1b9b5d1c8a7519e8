# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from xapi.errors import Violation
from xapi.validator import check_extensions, ensure_valid

# ISO 8601 duration, e.g. `P1D` or `PT1H30M12.5S`
_duration_pattern = re.compile(r"^P(?!$)(\d+(\.\d+)?Y)?(\d+(\.\d+)?M)?(\d+(\.\d+)?W)?(\d+(\.\d+)?D)?"
                               r"(T(?=\d)(\d+(\.\d+)?H)?(\d+(\.\d+)?M)?(\d+(\.\d+)?S)?)?$")


@dataclass(slots=True, frozen=True)
class Score:
    scaled: float | None = None
    """Score in the range -1 to 1."""
    raw: float | None = None
    min: float | None = None
    max: float | None = None

    def __post_init__(self) -> None:
        reasons = []
        if self.scaled is not None and not -1.0 <= self.scaled <= 1.0:
            reasons.append(Violation("scaled", f"must be between -1 and 1, but is {self.scaled}"))
        if self.min is not None and self.max is not None and self.min > self.max:
            reasons.append(Violation("min", f"must not be greater than max ({self.min} > {self.max})"))
        if self.raw is not None:
            if self.min is not None and self.raw < self.min:
                reasons.append(Violation("raw", f"must not be lower than min ({self.raw} < {self.min})"))
            if self.max is not None and self.raw > self.max:
                reasons.append(Violation("raw", f"must not be greater than max ({self.raw} > {self.max})"))
        ensure_valid(self, reasons)


@dataclass(slots=True, frozen=True)
class Result:
    """A measured outcome related to the statement."""

    score: Score | None = None
    success: bool | None = None
    completion: bool | None = None
    response: str | None = None
    duration: str | None = None
    """ISO 8601 duration."""
    extensions: dict[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        reasons = []
        if self.duration is not None and not _duration_pattern.match(self.duration):
            reasons.append(Violation("duration", f"must be an ISO 8601 duration, but is '{self.duration}'"))
        reasons.extend(check_extensions("extensions", self.extensions))
        ensure_valid(self, reasons)
