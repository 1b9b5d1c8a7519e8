# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Union
from uuid import UUID

from xapi.errors import Violation
from xapi.model import verb as verbs
from xapi.model.activity import Activity
from xapi.model.actor import ActorType, Agent, Group, check_authority
from xapi.model.attachment import Attachment
from xapi.model.context import Context
from xapi.model.object_type import ObjectType
from xapi.model.result import Result
from xapi.model.statement_reference import StatementReference
from xapi.model.util import coerce_uuid, freeze
from xapi.model.verb import Verb
from xapi.validator import (check_required, check_statement_object, check_statement_platform,
                            check_statement_revision, check_uuid, check_valid_actor, ensure_valid, is_xapi_version,
                            kind_of)


class CoreStatement:
    """The part shared by Statements and SubStatements:
    actor, verb, object and the optional result, context, timestamp and attachments."""

    __slots__ = ()

    # whether the object may itself be a SubStatement
    ALLOWS_SUB_STATEMENT_OBJECT: ClassVar[bool]

    def _normalize_core(self) -> None:
        """An Agent used as object is always tagged with its object type;
        a Group is left as it is, so a wrong object type gets reported."""
        freeze(self, "attachments")
        obj = self.object
        if kind_of(obj) == ObjectType.AGENT and obj.object_type is None:
            object.__setattr__(self, "object", obj.as_object())

    def _core_violations(self) -> list[Violation]:
        reasons = check_valid_actor("actor", self.actor)
        reasons.extend(check_required("verb", self.verb))
        reasons.extend(check_statement_object("object", self.object, self.ALLOWS_SUB_STATEMENT_OBJECT))
        reasons.extend(check_statement_platform(self))
        reasons.extend(check_statement_revision(self))
        if self.timestamp is not None and not isinstance(self.timestamp, datetime):
            reasons.append(Violation("timestamp", f"must be a datetime, but is '{type(self.timestamp).__name__}'"))
        return reasons


@dataclass(slots=True, frozen=True)
class SubStatement(CoreStatement):
    """A statement used as the object of another statement.
    It can not contain another SubStatement as its object.

    `timestamp` and `attachments` do not take part in equality.
    """

    KIND: ClassVar[ObjectType] = ObjectType.SUB_STATEMENT
    ALLOWS_SUB_STATEMENT_OBJECT: ClassVar[bool] = False

    actor: ActorType
    verb: Verb
    object: SubStatementObject
    result: Result | None = None
    context: Context | None = None
    timestamp: datetime | None = field(default=None, compare=False)
    attachments: tuple[Attachment, ...] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self._normalize_core()
        ensure_valid(self, self._core_violations())

    @property
    def object_type(self) -> str:
        return ObjectType.SUB_STATEMENT


@dataclass(slots=True, frozen=True, eq=False)
class Statement(CoreStatement):  # pylint: disable=too-many-instance-attributes
    """The top-level record of an experience: "I did this".

    Two statements with ids are equal if their ids are;
    statements without an id are compared field by field.
    """

    ALLOWS_SUB_STATEMENT_OBJECT: ClassVar[bool] = True

    actor: ActorType
    verb: Verb
    object: StatementObject
    id: UUID | None = None
    result: Result | None = None
    context: Context | None = None
    timestamp: datetime | None = None
    stored: datetime | None = None
    """Set by the LRS when the statement is recorded."""
    authority: ActorType | None = None
    version: str | None = None
    attachments: tuple[Attachment, ...] | None = None

    def __post_init__(self) -> None:
        coerce_uuid(self, "id")
        self._normalize_core()
        reasons = check_uuid("id", self.id, missing_ok=True)
        reasons.extend(self._core_violations())
        reasons.extend(check_authority("authority", self.authority))
        if self.version is not None and not is_xapi_version(self.version):
            reasons.append(Violation("version", f"must be a 1.0.x version, but is '{self.version}'"))
        if self.stored is not None and not isinstance(self.stored, datetime):
            reasons.append(Violation("stored", f"must be a datetime, but is '{type(self.stored).__name__}'"))
        ensure_valid(self, reasons)

    def _fields(self) -> tuple:
        return (self.id, self.actor, self.verb, self.object, self.result, self.context, self.timestamp, self.stored,
                self.authority, self.version, self.attachments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Statement):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        if self.id is not None:
            return hash(self.id)
        return hash(self._fields())

    def voiding(self) -> Statement:
        """Creates the statement that voids this one.

        The result has the `voided` verb and a reference to this statement as object;
        the actor is the one of this statement.
        Nothing is sent anywhere.
        """
        if self.id is None:
            raise ValueError("Can not void a statement without an id")
        return Statement(actor=self.actor, verb=verbs.VOIDED, object=StatementReference(id=self.id))


StatementObject = Union[Activity, Agent, Group, StatementReference, SubStatement]
SubStatementObject = Union[Activity, Agent, Group, StatementReference]
