# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Union

from xapi.errors import Violation
from xapi.model.object_type import ObjectType
from xapi.model.util import freeze
from xapi.validator import check_has_scheme, check_identifier_formats, check_identifiers, ensure_valid, kind_of


@dataclass(slots=True, frozen=True)
class Account:
    """A user account on an existing system, e.g. an LMS or intranet."""

    home_page: str
    """The canonical home page of the system the account is on."""
    name: str
    """The unique id or name used to log in to this account."""

    def __post_init__(self) -> None:
        reasons = check_has_scheme("homePage", self.home_page)
        if not self.name:
            reasons.append(Violation("name", "must not be empty"))
        ensure_valid(self, reasons)


@dataclass(slots=True, frozen=True)
class Actor:
    """Common part of Agents and Groups.
    Holds at most one inverse functional identifier (IFI):
    `mbox`, `mbox_sha1sum`, `openid` or `account`."""

    name: str | None = None
    mbox: str | None = None
    """A `mailto:` URI."""
    mbox_sha1sum: str | None = None
    """The hex encoded SHA1 hash of a `mailto:` URI."""
    openid: str | None = None
    account: Account | None = None

    def identifier(self) -> str | None:
        """Name of the identifying property that is set, if any."""
        for name in ("mbox", "mbox_sha1sum", "openid", "account"):
            if getattr(self, name) is not None:
                return name
        return None

    def is_identified(self) -> bool:
        return self.identifier() is not None

    def _actor_violations(self) -> list[Violation]:
        reasons = check_identifiers("", self, required=False)
        reasons.extend(check_identifier_formats("", self))
        return reasons


@dataclass(slots=True, frozen=True)
class Agent(Actor):
    """An individual person or system.

    `object_type` is only ever set to `"Agent"`, and only when the Agent is
    the object of a statement; as the actor of a statement it stays `None`.
    """

    KIND: ClassVar[ObjectType] = ObjectType.AGENT

    object_type: str | None = None

    def __post_init__(self) -> None:
        ensure_valid(self, self._actor_violations())

    def as_object(self) -> Agent:
        """This Agent, tagged for use as the object of a statement."""
        if self.object_type == ObjectType.AGENT:
            return self
        return replace(self, object_type=ObjectType.AGENT)


@dataclass(slots=True, frozen=True)
class Group(Actor):
    """A collection of Agents.
    A Group without an identifier is an "anonymous group"."""

    KIND: ClassVar[ObjectType] = ObjectType.GROUP

    member: tuple[Agent, ...] | None = None
    object_type: str = ObjectType.GROUP

    def __post_init__(self) -> None:
        freeze(self, "member")
        reasons = self._actor_violations()
        if self.object_type != ObjectType.GROUP:
            reasons.append(Violation("objectType", f"must be '{ObjectType.GROUP}', but is '{self.object_type}'"))
        for idx, agent in enumerate(self.member or ()):
            if kind_of(agent) != ObjectType.AGENT:
                reasons.append(Violation(f"member[{idx}]", f"must be an Agent, but is '{type(agent).__name__}'"))
        ensure_valid(self, reasons)

    def is_anonymous(self) -> bool:
        return not self.is_identified()


def check_authority(path: str, authority: Actor | None) -> list[Violation]:
    """An authority is an identified Agent, or a Group (e.g. the two-member OAuth group)."""
    if authority is None:
        return []
    kind = kind_of(authority)
    if kind == ObjectType.AGENT:
        return check_identifiers(path, authority, required=True)
    if kind == ObjectType.GROUP:
        return []
    return [Violation(path, f"must be an Agent or a Group, but is '{type(authority).__name__}'")]


ActorType = Union[Agent, Group]
