# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import unittest
from unittest import mock

import requests

from xapi.config import Config
from xapi.errors import MissingBodyError, TransportError
from xapi.request.transport import PageResponse, RequestsTransport, require_body

CONFIG = Config({
    "endpoint": "https://lrs.example.com/xapi/",
    "user_agent": "xapi-tests",
    "version": "1.0.3",
    "timeout": 5,
    "retries": 1,
    "backoff_factor": 0.5,
    "verify_ssl": True,
    "page_limit": None,
    "headers": {
        "Authorization": "Basic dGVzdDp0ZXN0"
    },
})


def _response(status_code: int, content: bytes, content_type: str = "application/json") -> mock.Mock:
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    response.content = content
    response.text = content.decode("utf-8")
    response.headers = {"Content-Type": content_type}
    return response


class TestRequestsTransport(unittest.TestCase):

    def setUp(self):
        self.transport = RequestsTransport(CONFIG)
        patcher = mock.patch.object(self.transport._session, "request")
        self.request = patcher.start()
        self.addCleanup(patcher.stop)

    def test_headers(self):
        headers = self.transport._session.headers
        self.assertEqual(headers["X-Experience-API-Version"], "1.0.3")
        self.assertEqual(headers["User-Agent"], "xapi-tests")
        self.assertEqual(headers["Authorization"], "Basic dGVzdDp0ZXN0")

    def test_fetch_page(self):
        self.request.return_value = _response(200, b'{"statements": []}')

        page = self.transport.fetch_page("https://lrs.example.com/xapi/statements")

        self.assertEqual(page, PageResponse(content_type="application/json", body=b'{"statements": []}'))
        self.request.assert_called_once_with("GET",
                                             "https://lrs.example.com/xapi/statements",
                                             data=None,
                                             headers=None,
                                             timeout=5)

    def test_send_with_body(self):
        self.request.return_value = _response(200, b'["fd41c918-b88b-4b20-a0a5-a4c32391aaa0"]')

        self.transport.send("POST", "https://lrs.example.com/xapi/statements", '[{"a": 1}]')

        _, kwargs = self.request.call_args
        self.assertEqual(kwargs["data"], b'[{"a": 1}]')
        self.assertEqual(kwargs["headers"], {"Content-Type": "application/json"})

    def test_send_with_content_type(self):
        self.request.return_value = _response(204, b"")

        self.transport.send("PUT", "https://lrs.example.com/xapi/activities/state", b"Hello World!", "text/plain")

        _, kwargs = self.request.call_args
        self.assertEqual(kwargs["data"], b"Hello World!")
        self.assertEqual(kwargs["headers"], {"Content-Type": "text/plain"})

    def test_no_content(self):
        self.request.return_value = _response(204, b"")
        page = self.transport.send("PUT", "https://lrs.example.com/xapi/statements?statementId=1", "{}")
        self.assertIsNone(page.body)
        self.assertEqual(page.status_code, 204)

    def test_error_status(self):
        self.request.return_value = _response(400, b"bad request", "text/plain")
        with self.assertRaises(TransportError) as ctx:
            self.transport.fetch_page("https://lrs.example.com/xapi/statements")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_connection_error(self):
        self.request.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(TransportError) as ctx:
            self.transport.fetch_page("https://lrs.example.com/xapi/statements")
        self.assertIsNone(ctx.exception.status_code)
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)


class TestRequireBody(unittest.TestCase):

    def test_require_body(self):
        self.assertEqual(require_body(PageResponse(content_type=None, body=b"{}"), "address"), b"{}")
        with self.assertRaises(MissingBodyError):
            require_body(PageResponse(content_type=None, body=None), "address")


if __name__ == '__main__':
    unittest.main()
