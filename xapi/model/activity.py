# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any, ClassVar

from xapi.errors import Violation
from xapi.model.object_type import ObjectType
from xapi.model.util import freeze
from xapi.validator import check_extensions, check_has_scheme, check_language_map, ensure_valid

# fields holding per-language maps, merged key by key
_LANGUAGE_MAP_FIELDS = ("name", "description")
_COMPONENT_FIELDS = ("choices", "scale", "source", "target", "steps")


class InteractionType(StrEnum):
    TRUE_FALSE = "true-false"
    CHOICE = "choice"
    FILL_IN = "fill-in"
    LONG_FILL_IN = "long-fill-in"
    MATCHING = "matching"
    PERFORMANCE = "performance"
    SEQUENCING = "sequencing"
    LIKERT = "likert"
    NUMERIC = "numeric"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class InteractionComponent:
    id: str
    description: dict[str, str] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        reasons = []
        if not self.id:
            reasons.append(Violation("id", "must not be empty"))
        reasons.extend(check_language_map("description", self.description))
        ensure_valid(self, reasons)


@dataclass(slots=True, frozen=True)
class ActivityDefinition:  # pylint: disable=too-many-instance-attributes
    """Metadata of an Activity."""

    name: dict[str, str] | None = field(default=None, hash=False)
    description: dict[str, str] | None = field(default=None, hash=False)
    type: str | None = None
    more_info: str | None = None
    interaction_type: InteractionType | None = None
    correct_responses_pattern: tuple[str, ...] | None = None
    choices: tuple[InteractionComponent, ...] | None = None
    scale: tuple[InteractionComponent, ...] | None = None
    source: tuple[InteractionComponent, ...] | None = None
    target: tuple[InteractionComponent, ...] | None = None
    steps: tuple[InteractionComponent, ...] | None = None
    extensions: dict[str, Any] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        freeze(self, "correct_responses_pattern")
        for name in _COMPONENT_FIELDS:
            freeze(self, name)
        reasons = check_language_map("name", self.name)
        reasons.extend(check_language_map("description", self.description))
        reasons.extend(check_has_scheme("type", self.type, missing_ok=True))
        reasons.extend(check_has_scheme("moreInfo", self.more_info, missing_ok=True))
        reasons.extend(check_extensions("extensions", self.extensions))
        if self.interaction_type is None:
            for name in _COMPONENT_FIELDS + ("correct_responses_pattern",):
                if getattr(self, name) is not None:
                    reasons.append(Violation(name, "only allowed together with an interactionType"))
        ensure_valid(self, reasons)

    def merge(self, later: ActivityDefinition | None) -> ActivityDefinition:
        """Folds a later (possibly partial) definition of the same activity into this one.

        The per-language `name` and `description` maps are merged key by key,
        with the later value winning on conflict.
        Every other field is replaced, if it is set in `later`.
        Extensions are replaced as a whole, never merged.
        """
        if later is None:
            return self
        changes: dict[str, Any] = {}
        for fld in fields(self):
            later_value = getattr(later, fld.name)
            if later_value is None:
                continue
            if fld.name in _LANGUAGE_MAP_FIELDS:
                merged = dict(getattr(self, fld.name) or {})
                merged.update(later_value)
                changes[fld.name] = merged
            else:
                changes[fld.name] = later_value
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class Activity:
    """The thing a statement is about.

    Two Activities are the same entity if their ids match;
    the `definition` does not take part in equality or hashing.
    """

    KIND: ClassVar[ObjectType] = ObjectType.ACTIVITY

    id: str
    definition: ActivityDefinition | None = field(default=None, compare=False)
    object_type: str | None = None
    """Either `None` or `"Activity"`; the object type of an activity is optional on the wire."""

    def __post_init__(self) -> None:
        reasons = check_has_scheme("id", self.id)
        if self.object_type is not None and self.object_type != ObjectType.ACTIVITY:
            reasons.append(Violation("objectType", f"must be '{ObjectType.ACTIVITY}', but is '{self.object_type}'"))
        ensure_valid(self, reasons)

    @classmethod
    def of(cls, id: str, **definition: Any) -> Activity:
        """Shorthand for an Activity, with the definition given as keyword arguments."""
        return cls(id=id, definition=ActivityDefinition(**definition) if definition else None)

    def merge(self, later: Activity) -> Activity:
        """Folds the definition of a later reference to the same activity into this one."""
        if later.id != self.id:
            raise ValueError(f"Can not merge activities with different ids: '{self.id}' and '{later.id}'")
        if self.definition is None:
            return replace(self, definition=later.definition)
        return replace(self, definition=self.definition.merge(later.definition))
