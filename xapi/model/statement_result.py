# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

from xapi.model.statement import Statement
from xapi.model.util import freeze


@dataclass(slots=True, frozen=True)
class StatementResult:
    """One page of a statement query."""

    statements: tuple[Statement, ...] = ()
    more: str | None = None
    """Address of the next page; `None` if this is the last one.
    Usually relative to the origin of the server (e.g. `/xapi/statements/more/1`)."""

    def __post_init__(self) -> None:
        freeze(self, "statements")
        if self.more == "":
            object.__setattr__(self, "more", None)

    def has_more(self) -> bool:
        return self.more is not None
