# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from xapi.errors import Violation
from xapi.model.activity import Activity
from xapi.model.actor import ActorType, Group
from xapi.model.object_type import ObjectType
from xapi.model.statement_reference import StatementReference
from xapi.model.util import coerce_uuid, freeze
from xapi.validator import (check_extensions, check_uuid, check_valid_actor, ensure_valid, is_bcp_47_language_tag,
                            kind_of)

_CONTEXT_ACTIVITY_KINDS = ("parent", "grouping", "category", "other")


@dataclass(slots=True, frozen=True)
class ContextActivities:
    """Activities the statement relates to, grouped by relation."""

    parent: tuple[Activity, ...] | None = None
    grouping: tuple[Activity, ...] | None = None
    category: tuple[Activity, ...] | None = None
    other: tuple[Activity, ...] | None = None

    def __post_init__(self) -> None:
        reasons = []
        for name in _CONTEXT_ACTIVITY_KINDS:
            freeze(self, name)
            for idx, activity in enumerate(getattr(self, name) or ()):
                if kind_of(activity) != ObjectType.ACTIVITY:
                    reasons.append(Violation(f"{name}[{idx}]",
                                             f"must be an Activity, but is '{type(activity).__name__}'"))
        ensure_valid(self, reasons)


@dataclass(slots=True, frozen=True)
class Context:  # pylint: disable=too-many-instance-attributes
    """Additional information about the circumstances of a statement."""

    registration: UUID | None = None
    instructor: ActorType | None = None
    team: Group | None = None
    context_activities: ContextActivities | None = None
    revision: str | None = None
    """Revision of the learning activity; only allowed if the statement object is an Activity."""
    platform: str | None = None
    """Platform used in the experience; only allowed if the statement object is an Activity."""
    language: str | None = None
    """BCP 47 language tag."""
    statement: StatementReference | None = None
    extensions: dict[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        coerce_uuid(self, "registration")
        reasons = check_uuid("registration", self.registration, missing_ok=True)
        if self.instructor is not None:
            reasons.extend(check_valid_actor("instructor", self.instructor))
        if self.team is not None and kind_of(self.team) != ObjectType.GROUP:
            reasons.append(Violation("team", f"must be a Group, but is '{type(self.team).__name__}'"))
        if self.language is not None and not is_bcp_47_language_tag(self.language):
            reasons.append(Violation("language", f"invalid language tag '{self.language}'"))
        if self.statement is not None and kind_of(self.statement) != ObjectType.STATEMENT_REF:
            reasons.append(Violation("statement", "must be a StatementRef"))
        reasons.extend(check_extensions("extensions", self.extensions))
        ensure_valid(self, reasons)
