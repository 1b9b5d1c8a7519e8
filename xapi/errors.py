# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass


class XapiError(Exception):
    pass


class ConfigError(XapiError):

    def __init__(self, msg: str, reasons: list[str]) -> None:
        super().__init__(msg)
        self.reasons = reasons


@dataclass(slots=True, frozen=True)
class Violation:
    """A single failed check, tagged with the path of the offending field."""
    path: str
    message: str

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}: {self.message}"


class ValidationError(XapiError):

    def __init__(self, msg: str, violations: list[Violation]) -> None:
        super().__init__(msg)
        self.violations = violations
        self.reasons = [str(violation) for violation in violations]


class DecodeError(XapiError):

    def __init__(self, msg: str, path: str = "") -> None:
        super().__init__(f"{path}: {msg}" if path else msg)
        self.path = path


class MissingBodyError(XapiError):
    pass


class NoMoreStatementsError(XapiError, LookupError):
    pass


class SerializerError(XapiError):
    pass


class TransportError(XapiError):

    def __init__(self, msg: str, status_code: int | None = None) -> None:
        super().__init__(msg)
        self.status_code = status_code


class NotOverriddenError(XapiError, NotImplementedError):
    pass
