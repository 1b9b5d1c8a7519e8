# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field

from xapi.validator import check_has_scheme, check_language_map, ensure_valid

ADL_VERBS_BASE = "http://adlnet.gov/expapi/verbs/"


@dataclass(slots=True, frozen=True)
class Verb:
    """The action between an actor and an activity."""

    id: str
    """URI identifying the verb."""
    display: dict[str, str] | None = field(default=None, hash=False)
    """Human readable representation of the verb, keyed by language tag.
    Insertion order is kept for serialization; equality ignores it."""

    def __post_init__(self) -> None:
        reasons = check_has_scheme("id", self.id)
        reasons.extend(check_language_map("display", self.display))
        ensure_valid(self, reasons)


def _adl_verb(name: str) -> Verb:
    return Verb(id=ADL_VERBS_BASE + name, display={"und": name})


ANSWERED = _adl_verb("answered")
ASKED = _adl_verb("asked")
ATTEMPTED = _adl_verb("attempted")
ATTENDED = _adl_verb("attended")
COMMENTED = _adl_verb("commented")
COMPLETED = _adl_verb("completed")
EXITED = _adl_verb("exited")
EXPERIENCED = _adl_verb("experienced")
FAILED = _adl_verb("failed")
IMPORTED = _adl_verb("imported")
INITIALIZED = _adl_verb("initialized")
INTERACTED = _adl_verb("interacted")
LAUNCHED = _adl_verb("launched")
MASTERED = _adl_verb("mastered")
PASSED = _adl_verb("passed")
PREFERRED = _adl_verb("preferred")
PROGRESSED = _adl_verb("progressed")
REGISTERED = _adl_verb("registered")
RESPONDED = _adl_verb("responded")
RESUMED = _adl_verb("resumed")
SCORED = _adl_verb("scored")
SHARED = _adl_verb("shared")
SUSPENDED = _adl_verb("suspended")
TERMINATED = _adl_verb("terminated")
VOIDED = _adl_verb("voided")
"""The one verb with a meaning defined by the xAPI specification itself."""
