# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from xapi.model.activity import Activity
from xapi.model.object_type import ObjectType
from xapi.model.statement import Statement
from xapi.validator import Validator, is_bcp_47_language_tag, is_sha256_hash, join_path, kind_of


class StrictValidator(Validator):
    """Checks what a statement needs beyond being well-formed,
    before it is sent to an LRS or accepted from a file:
    an id and a timestamp, a displayable verb,
    proper language tags in all language maps and SHA-256 attachment hashes."""

    def validate(self, statement: Statement) -> tuple[bool, list[str]]:
        reasons = []

        if statement.id is None:
            reasons.append("missing id")
        if statement.timestamp is None:
            reasons.append("missing timestamp")
        if not statement.verb.display:
            reasons.append("missing verb.display")
        reasons.extend(_validate_language_map("verb.display", statement.verb.display))

        for path, activity in _activities(statement):
            reasons.extend(_validate_activity(path, activity))

        for idx, attachment in enumerate(statement.attachments or ()):
            path = f"attachments[{idx}]"
            if attachment.sha2 is not None and not is_sha256_hash(attachment.sha2):
                reasons.append(f"{path}.sha2 must be a SHA-256 hash, but is '{attachment.sha2}'")
            reasons.extend(_validate_language_map(path + ".display", attachment.display))

        if reasons:
            return False, reasons
        return True, []


def _activities(statement: Any, path: str = "") -> Iterable[tuple[str, Activity]]:
    """All activities a statement refers to, with their paths."""
    obj = statement.object
    if kind_of(obj) == ObjectType.ACTIVITY:
        yield join_path(path, "object"), obj
    elif kind_of(obj) == ObjectType.SUB_STATEMENT:
        yield from _activities(obj, join_path(path, "object"))
    context = statement.context
    if context is not None and context.context_activities is not None:
        for kind in ("parent", "grouping", "category", "other"):
            for idx, activity in enumerate(getattr(context.context_activities, kind) or ()):
                yield f"{join_path(path, 'context.contextActivities', kind)}[{idx}]", activity


def _validate_activity(path: str, activity: Activity) -> list[str]:
    definition = activity.definition
    if definition is None:
        return []
    reasons = _validate_language_map(path + ".definition.name", definition.name)
    reasons.extend(_validate_language_map(path + ".definition.description", definition.description))
    return reasons


def _validate_language_map(title: str, value: Mapping[str, str] | None) -> list[str]:
    if value is None:
        return []
    reasons = []
    for language in value:
        if not is_bcp_47_language_tag(language):
            reasons.append(f"{title} has an invalid language tag '{language}'")
    return reasons
