# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import unittest
from pathlib import Path

from xapi.config import (BASE_SCHEMA, CliConfigLoader, Config, EnvConfigLoader, XapiConfigLoader,
                         YamlFileConfigLoader, effective_config_info)
from xapi.errors import ConfigError

RESOURCES = Path(__file__).parent / "resources"


class TestConfig(unittest.TestCase):

    def test_access(self):
        config = Config({"timeout": 5, "headers": {"Authorization": "Basic dGVzdDp0ZXN0"}})
        self.assertEqual(config["timeout"], 5)
        self.assertEqual(config.timeout, 5)
        self.assertEqual(config.headers["Authorization"], "Basic dGVzdDp0ZXN0")
        self.assertEqual(config.get("retries", 3), 3)

    def test_set(self):
        config = Config()
        config.timeout = 5
        config["retries"] = 1
        self.assertEqual(config.to_dict(), {"timeout": 5, "retries": 1})

    def test_missing_attribute(self):
        with self.assertRaises(AttributeError):
            _ = Config().foo


class TestConfigLoaders(unittest.TestCase):

    def test_yaml_file(self):
        config = XapiConfigLoader(BASE_SCHEMA, YamlFileConfigLoader(BASE_SCHEMA, RESOURCES / "config.yml")).load()

        self.assertEqual(config.endpoint, "https://lrs.example.com/xapi/")
        self.assertEqual(config.user_agent, "xapi-tests")
        self.assertEqual(config.timeout, 5)
        self.assertEqual(config.page_limit, 50)
        self.assertEqual(config.headers["Authorization"], "Basic dGVzdDp0ZXN0")
        # defaults
        self.assertEqual(config.version, "1.0.3")
        self.assertTrue(config.verify_ssl)

    def test_invalid_yaml_file(self):
        loader = YamlFileConfigLoader(BASE_SCHEMA, RESOURCES / "config_invalid.yml")
        with self.assertRaises(ConfigError) as ctx:
            loader.load()
        self.assertEqual(len(ctx.exception.reasons), 2)

    def test_missing_yaml_file(self):
        with self.assertRaises(ConfigError):
            YamlFileConfigLoader(BASE_SCHEMA, RESOURCES / "does_not_exist.yml").load()

    def test_missing_endpoint(self):
        with self.assertRaises(ConfigError) as ctx:
            XapiConfigLoader(BASE_SCHEMA, CliConfigLoader(BASE_SCHEMA, {})).load()
        self.assertEqual(ctx.exception.reasons, ["missing option 'endpoint'."])

    def test_environment(self):
        environ = {
            "XAPI_ENDPOINT": "http://localhost:8080/xapi",
            "XAPI_TIMEOUT": "30",
            "XAPI_VERIFY_SSL": "false",
            "UNRELATED": "1",
        }
        config = XapiConfigLoader(BASE_SCHEMA, EnvConfigLoader(BASE_SCHEMA, environ)).load()

        self.assertEqual(config.endpoint, "http://localhost:8080/xapi")
        self.assertEqual(config.timeout, 30)
        self.assertFalse(config.verify_ssl)

    def test_unparsable_environment(self):
        with self.assertRaises(ConfigError) as ctx:
            EnvConfigLoader(BASE_SCHEMA, {"XAPI_TIMEOUT": "soon"}).load()
        for reason in ctx.exception.reasons:
            self.assertTrue(reason.startswith("invalid option 'timeout'"))

    def test_invalid_environment(self):
        with self.assertRaises(ConfigError):
            EnvConfigLoader(BASE_SCHEMA, {"XAPI_RETRIES": "-1"}).load()

    def test_priority(self):
        cli = CliConfigLoader(BASE_SCHEMA, {"timeout": "20", "user_agent": None})
        env = EnvConfigLoader(BASE_SCHEMA, {"XAPI_TIMEOUT": "30", "XAPI_USER_AGENT": "from-env"})
        yaml_file = YamlFileConfigLoader(BASE_SCHEMA, RESOURCES / "config.yml")

        config = XapiConfigLoader(BASE_SCHEMA, cli, env, yaml_file).load()

        self.assertEqual(config.timeout, 20)
        self.assertEqual(config.user_agent, "from-env")
        self.assertEqual(config.endpoint, "https://lrs.example.com/xapi/")

    def test_effective_config_info(self):
        config = XapiConfigLoader(BASE_SCHEMA, YamlFileConfigLoader(BASE_SCHEMA, RESOURCES / "config.yml")).load()
        info = list(effective_config_info(config))
        self.assertIn("endpoint=https://lrs.example.com/xapi/", info)
        self.assertIn("timeout=5", info)
        self.assertIn("headers=" + "X" * 20, info)


if __name__ == '__main__':
    unittest.main()
