# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from xapi.cli.command import XapiCommand
from xapi.cli.command.validate.config import ValidateConfigCommand
from xapi.cli.command.validate.statement import ValidateStatementCommand


class ValidateCommand(XapiCommand):
    """Validate resources.

    validate
    """

    commands = [
        ValidateConfigCommand(),
        ValidateStatementCommand(),
    ]

    def handle(self):
        self.call("help", "validate")
