# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from cleo import Command
from clikit.api.args.format import Option

from xapi.config import (BASE_SCHEMA, CliConfigLoader, Config, EnvConfigLoader, XapiConfigLoader, YamlFileConfigLoader,
                         effective_config_info, iterate_schema)
from xapi.log import get_child_logger

log = get_child_logger("cli")


class XapiCommand(Command):

    def option_int(self, key, default=None, min=None, max=None) -> int | None:
        value = self.option(key)
        if value is None:
            return default
        try:
            number = int(str(value).strip())
        except ValueError as err:
            raise ValueError(f"'{key}' must be a number, got this instead: {value}") from err
        if min is not None and number < min:
            raise ValueError(f"'{key}' must be at least {min}, got {number}")
        if max is not None and number > max:
            raise ValueError(f"'{key}' must be at most {max}, got {number}")
        return number

    def option_datetime(self, key) -> datetime | None:
        value = self.option(key)
        if value is None:
            return None
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as err:
            raise ValueError(f"'{key}' must be an ISO 8601 timestamp, got this instead: {value}") from err

    def _file_argument(self, key) -> Path:
        path = Path(self.argument(key))
        if not path.exists():
            raise FileNotFoundError(f"'{path}' doesn't exist")
        if not path.is_file():
            raise OSError(f"'{path}' is not a file")
        return path

    def _load_config(self, schema: Mapping = BASE_SCHEMA) -> Config:
        cli_options = self._get_options_from_schema(schema)

        # normalize and validate config
        cli_config_loader = CliConfigLoader(schema, cli_options)
        env_config_loader = EnvConfigLoader(schema)
        yaml_config_loader = YamlFileConfigLoader(schema, self.option("config"))
        # the order specifies the priority of the options (CLI before environment before file)
        config = XapiConfigLoader(schema, cli_config_loader, env_config_loader, yaml_config_loader).load()

        for line in effective_config_info(config, schema):
            log.debug("config: %s", line)
        return config

    @staticmethod
    def _normalize_option_name(name: str) -> str:
        pattern = re.compile(r"[^a-z0-9]")
        return re.sub(pattern, "-", name)

    def _add_options_from_schema(self, schema: Mapping = BASE_SCHEMA) -> None:
        for _, rule in iterate_schema(schema):
            meta = rule.get("meta", {})
            long_name = meta.get("long_name")
            if not long_name:
                continue
            self._config.add_option(
                long_name=self._normalize_option_name(long_name),
                short_name=meta.get("short_name"),
                flags=Option.REQUIRED_VALUE,
                description=meta.get("description"),
            )

    def _get_options_from_schema(self, schema: Mapping = BASE_SCHEMA) -> dict:
        options = {}
        for name, rule in iterate_schema(schema):
            long_name = rule.get("meta", {}).get("long_name")
            if long_name:
                options[name] = self.option(self._normalize_option_name(long_name))
        return options
