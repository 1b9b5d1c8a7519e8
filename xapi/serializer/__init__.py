# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from xapi.model.statement import Statement
from xapi.model.statement_result import StatementResult


class StatementSerializer:
    """Interface for serializing statements and their parts."""

    @classmethod
    def extensions(cls) -> list[str]:
        """Returns a list of supported file extensions in all lower-case,
        without a leading dot."""
        raise NotImplementedError()

    def serialize(self, entity, pretty: bool = False) -> str:
        raise NotImplementedError()


class StatementDeserializer:
    """Interface for deserializing statements."""

    @classmethod
    def extensions(cls) -> list[str]:
        """Returns a list of supported file extensions in all lower-case."""
        raise NotImplementedError()

    def deserialize(self, serialized: str | bytes) -> Statement:
        raise NotImplementedError()

    def deserialize_statement_result(self, serialized: str | bytes) -> StatementResult:
        raise NotImplementedError()
