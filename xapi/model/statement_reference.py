# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar
from uuid import UUID

from xapi.model.object_type import ObjectType
from xapi.model.util import coerce_uuid
from xapi.validator import check_uuid, ensure_valid


@dataclass(slots=True, frozen=True)
class StatementReference:
    """Points to another statement by its id, e.g. the one being voided."""

    KIND: ClassVar[ObjectType] = ObjectType.STATEMENT_REF

    id: UUID

    def __post_init__(self) -> None:
        coerce_uuid(self, "id")
        ensure_valid(self, check_uuid("id", self.id))

    @property
    def object_type(self) -> str:
        return ObjectType.STATEMENT_REF
