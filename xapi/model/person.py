# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from xapi.errors import Violation
from xapi.model.actor import Account
from xapi.model.object_type import ObjectType
from xapi.model.util import freeze
from xapi.validator import ensure_valid, is_mbox, is_sha1_hash


@dataclass(slots=True, frozen=True)
class Person:
    """Everything an LRS knows about the identities of one Agent, as returned by the agents resource.
    Unlike an Agent, every property is a list and several identifiers may be set at once."""

    KIND: ClassVar[ObjectType] = ObjectType.PERSON

    name: tuple[str, ...] | None = None
    mbox: tuple[str, ...] | None = None
    mbox_sha1sum: tuple[str, ...] | None = None
    openid: tuple[str, ...] | None = None
    account: tuple[Account, ...] | None = None
    object_type: str = ObjectType.PERSON

    def __post_init__(self) -> None:
        for name in ("name", "mbox", "mbox_sha1sum", "openid", "account"):
            freeze(self, name)
        reasons = []
        if self.object_type != ObjectType.PERSON:
            reasons.append(Violation("objectType", f"must be '{ObjectType.PERSON}', but is '{self.object_type}'"))
        for idx, mbox in enumerate(self.mbox or ()):
            if not is_mbox(mbox):
                reasons.append(Violation(f"mbox[{idx}]", f"must be a 'mailto:' email URI, but is '{mbox}'"))
        for idx, mbox_sha1sum in enumerate(self.mbox_sha1sum or ()):
            if not is_sha1_hash(mbox_sha1sum):
                reasons.append(Violation(f"mbox_sha1sum[{idx}]", "must be a lower-case hex SHA1 hash"))
        for idx, account in enumerate(self.account or ()):
            if not isinstance(account, Account):
                reasons.append(Violation(f"account[{idx}]", f"must be an Account, but is '{type(account).__name__}'"))
        ensure_valid(self, reasons)
