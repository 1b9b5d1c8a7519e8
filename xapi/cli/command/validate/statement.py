# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from xapi.cli.command import XapiCommand
from xapi.errors import DecodeError
from xapi.serializer.json_deserializer import JsonStatementDeserializer
from xapi.validator.strict import StrictValidator


class ValidateStatementCommand(XapiCommand):
    """Validate the statement(s) in a given JSON file. Non-zero return codes indicate an error.

    statement
        {file : JSON file holding a statement or an array of statements}
        {--q|quiet : Do not print reasons in case of invalid statements}
        {--lenient : Only check that the statements are well-formed}
    """

    def handle(self):
        path = self._file_argument("file")
        quiet = self.option("quiet")

        deserializer = JsonStatementDeserializer()
        if path.suffix.lower().lstrip(".") not in deserializer.extensions():
            raise ValueError(f"Unknown file type '{path.suffix}'")
        with path.open("rb") as f:
            content = f.read()
        try:
            statements = deserializer.deserialize_statements(content)
        except DecodeError as err:
            if not quiet:
                self.line(str(err))
            return 1

        if self.option("lenient"):
            return 0

        validator = StrictValidator()
        failures = 0
        for idx, statement in enumerate(statements):
            ok, reasons = validator.validate(statement)
            if not ok:
                failures += 1
                if not quiet:
                    prefix = f"[{idx}] " if len(statements) > 1 else ""
                    for r in reasons:
                        self.line(prefix + r)

        return 1 if failures else 0
