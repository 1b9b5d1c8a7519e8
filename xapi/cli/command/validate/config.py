# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from xapi.cli.command import XapiCommand
from xapi.config import BASE_SCHEMA, EnvConfigLoader, XapiConfigLoader, YamlFileConfigLoader, effective_config_info
from xapi.errors import ConfigError


class ValidateConfigCommand(XapiCommand):
    """Validate a given configuration file and print the resulting options.
    Non-zero return codes indicate an error.

    config
        {file : Config file to validate}
        {--q|quiet : Print nothing, only set the return code}
        {--env : Also apply XAPI_* environment variables, as a real run would}
    """

    def handle(self):
        path = self._file_argument("file")
        quiet = self.option("quiet")

        loaders = [YamlFileConfigLoader(BASE_SCHEMA, path)]
        if self.option("env"):
            loaders.insert(0, EnvConfigLoader(BASE_SCHEMA))
        try:
            config = XapiConfigLoader(BASE_SCHEMA, *loaders).load()
        except ConfigError as err:
            if not quiet:
                for reason in err.reasons:
                    self.line(reason)
            return 1

        if not quiet:
            for line in effective_config_info(config):
                self.line(line)
        return 0
