# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field

from xapi.errors import Violation
from xapi.validator import check_has_scheme, check_language_map, ensure_valid


@dataclass(slots=True, frozen=True)
class Attachment:
    """Describes a file attached to a statement, e.g. a certificate or a recording.
    The content itself is transported separately (multipart), or found at `file_url`."""

    usage_type: str
    display: dict[str, str] | None = field(default=None, hash=False)
    content_type: str | None = None
    length: int | None = None
    sha2: str | None = None
    description: dict[str, str] | None = field(default=None, hash=False)
    file_url: str | None = None

    def __post_init__(self) -> None:
        reasons = check_has_scheme("usageType", self.usage_type)
        reasons.extend(check_language_map("display", self.display))
        reasons.extend(check_language_map("description", self.description))
        reasons.extend(check_has_scheme("fileUrl", self.file_url, missing_ok=True))
        if not self.content_type:
            reasons.append(Violation("contentType", "must not be empty"))
        if self.length is None or self.length < 0:
            reasons.append(Violation("length", f"must be a non-negative integer, but is {self.length}"))
        if not self.sha2:
            reasons.append(Violation("sha2", "must not be empty"))
        ensure_valid(self, reasons)
