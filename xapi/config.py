# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Client configuration: where the LRS is and how to talk to it.

Options may come from the command line, from `XAPI_*` environment variables
and from a YAML file. All sources are described by one (cerberus) schema.
Each source is checked on its own first, so a bad value is reported together
with the place it came from; the merged result is then checked once more,
this time with defaults and required options.\
"""

from __future__ import annotations

import os
from collections.abc import Generator, Mapping, MutableMapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from cerberus import Validator
from cerberus.errors import REQUIRED_FIELD, BasicErrorHandler
from str_to_bool import str_to_bool

from xapi.errors import ConfigError, NotOverriddenError

ENV_PREFIX = "XAPI"

# see: https://docs.python-cerberus.org/en/stable/index.html
BASE_SCHEMA = {
    "endpoint": {
        "type": "string",
        "coerce": "strip_str",
        "required": True,
        "empty": False,
        "check_with": "http_url",
        "meta": {
            "long_name": "endpoint",
            "description": "Base URL of the LRS, e.g. 'https://lrs.example.com/xapi/'"
        },
    },
    "user_agent": {
        "type": "string",
        "coerce": "strip_str",
        "default": "xapi-client",
        "empty": False,
        "meta": {
            "long_name": "user-agent",
            "description": "Agent name sent with every request"
        },
    },
    "version": {
        "type": "string",
        "coerce": "strip_str",
        "default": "1.0.3",
        "allowed": ["1.0.0", "1.0.1", "1.0.2", "1.0.3"],
        "meta": {
            "long_name": "xapi-version",
            "description": "Value of the X-Experience-API-Version header"
        },
    },
    "timeout": {
        "type": "integer",
        "coerce": "integer",
        "default": 10,
        "min": 1,
        "meta": {
            "long_name": "timeout",
            "description": "Max seconds to wait for a not responding LRS"
        }
    },
    "retries": {
        "type": "integer",
        "coerce": "integer",
        "default": 3,
        "min": 0,
        "meta": {
            "long_name": "retries",
            "description": "Number of retries of requests in cases of network errors"
        }
    },
    "backoff_factor": {
        "type": "float",
        "coerce": "float",
        "default": 0.5,
        "min": 0.0,
        "meta": {
            "long_name": "backoff-factor",
            "description": "Factor for the exponential delay between retries"
        }
    },
    "verify_ssl": {
        "type": "boolean",
        "coerce": "boolean",
        "default": True,
        # a flag can't be told apart from its absence on the CLI, so file and environment only
        "meta": {
            "description": "Whether to verify the TLS certificate of the LRS"
        }
    },
    "page_limit": {
        "type": "integer",
        "coerce": "integer",
        "nullable": True,
        "default": None,
        "min": 0,
        "meta": {
            "long_name": "page-limit",
            "description": "Max number of statements per page requested from the LRS (0 means server default)"
        }
    },
    "headers": {
        "type": "dict",
        "default": {},
        "keysrules": {
            "type": "string"
        },
        "valuesrules": {
            "type": "string"
        },
        "meta": {
            "description": "Extra HTTP headers, e.g. for authorization",
            "redact_log": True,
        },
    },
}

_REQUIRED_MESSAGE = BasicErrorHandler.messages[REQUIRED_FIELD.code]


def iterate_schema(schema: Mapping) -> Generator[tuple[str, Mapping]]:
    """Yields the options of a schema together with their rules."""
    yield from schema.items()


def _source_schema(schema: Mapping) -> dict:
    """The schema a single source is checked against: every option is optional
    and without default, so missing options stay missing until all sources are merged."""
    return {
        name: {rule: value for rule, value in rules.items() if rule not in ("default", "required")}
        for name, rules in schema.items()
    }


def _render_errors(errors: Mapping[str, list]) -> list[str]:
    reasons = []
    for name, messages in errors.items():
        for msg in messages:
            if msg == _REQUIRED_MESSAGE:
                reasons.append(f"missing option '{name}'.")
            else:
                reasons.append(f"invalid option '{name}': {msg}")
    return reasons


def validate(config: Mapping, schema: Mapping, partial=False) -> tuple[dict | None, list[str]]:
    """Normalize and validate a config against a given schema.

    Options with a `None` value count as not given.

    Args:
        config (Mapping): Config to normalize and validate.
        schema (Mapping): Schema used for validation.
        partial (bool): Check a single source only, i.e. don't apply defaults
            and don't require any option.

    Returns:
        tuple(dict | None, list[str]): Tuple of normalized/validated config and
            reasons why the validation failed.
    """
    given = {name: value for name, value in config.items() if value is not None}
    validator = ConfigValidator(_source_schema(schema) if partial else schema, purge_unknown=True)
    if not validator.validate(given):
        return None, _render_errors(validator.errors)
    return validator.document, []


def effective_config_info(config: Config, schema: Mapping = BASE_SCHEMA) -> Generator[str]:
    """Renders every option as `name=value`, hiding values that may hold secrets."""
    for name, rules in iterate_schema(schema):
        if name not in config:
            value = "(unset)"
        elif rules.get("meta", {}).get("redact_log", False):
            value = "X" * 20
        else:
            value = config[name]
        yield f"{name}={value}"


class Config(MutableMapping):
    """Validated options, readable as items or attributes:
    `config["timeout"]` and `config.timeout` are the same.

    Args:
        mapping (Mapping): Initial options.
    """

    def __init__(self, mapping: Mapping | None = None) -> None:
        super().__setattr__("_options", dict(mapping or {}))

    def __getitem__(self, key):
        return self._options[key]

    def __getattr__(self, key):
        try:
            return self._options[key]
        except KeyError:
            raise AttributeError(key)  # pylint: disable=raise-missing-from

    def __setitem__(self, key, value):
        self._options[key] = value

    def __setattr__(self, key, value):
        self[key] = value

    def __delitem__(self, key):
        del self._options[key]

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"{type(self).__name__}({self._options!r})"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._options)


class ConfigValidator(Validator):
    """Cerberus validator with the coercers and checks the options need.
    Values from the CLI and the environment always arrive as strings."""

    def _normalize_coerce_strip_str(self, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        # leave other types untouched, so type validation will detect wrong types
        return value

    def _normalize_coerce_boolean(self, value: Any) -> Any:
        if isinstance(value, str):
            return bool(str_to_bool(value.strip()))
        return value

    def _normalize_coerce_float(self, value: Any) -> Any:
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return float(value)
        return value

    def _normalize_coerce_integer(self, value: Any) -> Any:
        if isinstance(value, str):
            return int(value.strip())
        return value

    def _check_with_http_url(self, field, value):
        """Check if a value is an absolute http(s) URL."""
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            self._error(field, f"not an absolute http(s) URL: {value}")


class ConfigLoader:
    """ConfigLoader is an interface used to load a configuration from a source."""

    def load(self) -> Config:
        """Load a configuration from a source and normalize/validate it.

        Raises:
            ConfigError: If the loader was unable to load or
                normalize/validate the configuration.

        Returns:
            Config: Loaded and validated options of the source.
        """
        raise NotOverriddenError()


def _checked(raw: Mapping, schema: Mapping, source: str) -> Config:
    validated, reasons = validate(raw, schema, partial=True)
    if reasons:
        raise ConfigError("invalid options in {}:\n    {}".format(source, "\n    ".join(reasons)), reasons)
    return Config(validated)


class CliConfigLoader(ConfigLoader):
    """Options given on the command line.

    Args:
        schema (Mapping): Schema used for normalization/validation.
        config (Mapping): Option values by option name, `None` if not given.
    """

    def __init__(self, schema: Mapping, config: Mapping | None) -> None:
        self._schema = schema
        self._config = config or {}

    def load(self) -> Config:
        return _checked(self._config, self._schema, "the command line")


class EnvConfigLoader(ConfigLoader):
    """Options from environment variables, e.g. `XAPI_ENDPOINT` or `XAPI_PAGE_LIMIT`.

    Args:
        schema (Mapping): Schema used for normalization/validation.
        environ (Mapping, optional): Variables to read from. Defaults to `os.environ`.
    """

    def __init__(self, schema: Mapping, environ: Mapping[str, str] | None = None) -> None:
        self._schema = schema
        self._environ = os.environ if environ is None else environ

    @staticmethod
    def variable_name(option: str) -> str:
        return f"{ENV_PREFIX}_{option.upper()}"

    def load(self) -> Config:
        raw = {}
        for name, rules in iterate_schema(self._schema):
            variable = self.variable_name(name)
            if rules["type"] != "dict" and variable in self._environ:
                raw[name] = self._environ[variable]
        return _checked(raw, self._schema, "the environment")


class YamlFileConfigLoader(ConfigLoader):
    """Options from a YAML file. Without a path, there are no options.

    Args:
        schema (Mapping): Schema used for normalization/validation.
        path (str or Path): Path to YAML file to be loaded.
    """

    def __init__(self, schema: Mapping, path: str | Path | None) -> None:
        self._schema = schema
        self._path = Path(path) if path is not None else None

    def load(self) -> Config:
        if self._path is None:
            return Config()
        try:
            with self._path.open("r") as f:
                raw = yaml.safe_load(f) or {}
        except OSError as err:
            raise ConfigError(f"Failed to load YAML config: {err}", reasons=[str(err)]) from err
        except yaml.YAMLError as err:
            raise ConfigError(f"Failed to parse YAML config '{self._path}': {err}", reasons=[str(err)]) from err
        if not isinstance(raw, Mapping):
            raise ConfigError(f"YAML config '{self._path}' is not a mapping", reasons=["not a mapping"])
        return _checked(raw, self._schema, f"the configuration file '{self._path}'")


class XapiConfigLoader(ConfigLoader):
    """Merge multiple ConfigLoaders into one config and validate the result.

    Args:
        schema (Mapping): Schema of the final config.
        *loaders (ConfigLoader): Loaders to be merged into one,
            the first one having the highest priority.
    """

    def __init__(self, schema: Mapping, *loaders: ConfigLoader) -> None:
        self._schema = schema
        self._loaders = loaders

    def load(self) -> Config:
        configs = [ldr.load() for ldr in self._loaders]

        merged = {}
        for config in reversed(configs):
            merged.update(config)

        validated, reasons = validate(merged, self._schema)
        if reasons:
            raise ConfigError(
                "There is one or more errors in the configuration:\n    {}".format("\n    ".join(reasons)),
                reasons,
            )
        return Config(validated)
