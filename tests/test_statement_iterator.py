# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import unittest
from pathlib import Path
from uuid import UUID

from xapi.errors import DecodeError, MissingBodyError, NoMoreStatementsError, TransportError
from xapi.request.transport import PageResponse
from xapi.statement_iterator import IteratorState, StatementIterator

RESOURCES = Path(__file__).parent / "resources"

BASE_ADDRESS = "https://lrs.example.com/xapi/statements?limit=2"
MORE_ADDRESS = "https://lrs.example.com/statements/more/1"


def _page(name: str) -> PageResponse:
    return PageResponse(content_type="application/json", body=(RESOURCES / name).read_bytes())


def _ids(*suffixes: str) -> list[UUID]:
    return [UUID(f"c0e7d3a6-6a6f-4a0e-9a37-1b5f7a0e{suffix}") for suffix in suffixes]


class FakeLrs:
    """Serves canned responses by address and records every fetch."""

    def __init__(self, pages: dict[str, PageResponse | Exception]) -> None:
        self.pages = pages
        self.fetched: list[str] = []

    def fetch_page(self, address: str) -> PageResponse:
        self.fetched.append(address)
        page = self.pages[address]
        if isinstance(page, Exception):
            raise page
        return page


class TestStatementIterator(unittest.TestCase):

    def setUp(self):
        self.lrs = FakeLrs({
            BASE_ADDRESS: _page("statements_page_1.json"),
            MORE_ADDRESS: _page("statements_page_2.json"),
        })

    def test_iterates_all_pages_in_order(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)

        ids = []
        while iterator.has_next():
            ids.append(iterator.next().id)

        self.assertEqual(ids, _ids("0001", "0002", "0003"))
        with self.assertRaises(NoMoreStatementsError):
            iterator.next()
        self.assertEqual(self.lrs.fetched, [BASE_ADDRESS, MORE_ADDRESS])

    def test_python_iteration(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        self.assertEqual([statement.id for statement in iterator], _ids("0001", "0002", "0003"))

    def test_stream(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        self.assertEqual([statement.id for statement in iterator.stream()], _ids("0001", "0002", "0003"))

    def test_more_is_resolved_against_origin(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        list(iterator)
        self.assertEqual(self.lrs.fetched[1], "https://lrs.example.com/statements/more/1")

    def test_no_fetch_before_needed(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)

        first = next(iterator.stream())

        self.assertEqual(first.id, _ids("0001")[0])
        self.assertEqual(self.lrs.fetched, [BASE_ADDRESS])

    def test_next_fetches_across_pages(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)

        ids = [iterator.next().id for _ in range(3)]

        self.assertEqual(ids, _ids("0001", "0002", "0003"))
        self.assertEqual(self.lrs.fetched, [BASE_ADDRESS, MORE_ADDRESS])
        with self.assertRaises(NoMoreStatementsError):
            iterator.next()
        self.assertEqual(len(self.lrs.fetched), 2)

    def test_more_on_another_origin_stays_on_lrs(self):
        lrs = FakeLrs({
            BASE_ADDRESS: PageResponse(
                content_type="application/json",
                body=_page("statements_page_1.json").body.replace(b'"/statements/more/1"',
                                                                  b'"https://other.example.org/statements/more/1"')),
            MORE_ADDRESS: _page("statements_page_2.json"),
        })
        iterator = StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)

        self.assertEqual(len(list(iterator)), 3)
        self.assertEqual(lrs.fetched, [BASE_ADDRESS, MORE_ADDRESS])

    def test_more_back_to_fetched_page_stops(self):
        lrs = FakeLrs({
            BASE_ADDRESS: _page("statements_page_1.json"),
            MORE_ADDRESS: PageResponse(content_type="application/json",
                                       body=b'{"statements": [], "more": "/statements/more/1"}'),
        })
        iterator = StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)

        self.assertEqual(len(list(iterator)), 2)
        self.assertEqual(lrs.fetched, [BASE_ADDRESS, MORE_ADDRESS])
        self.assertEqual(iterator.state, IteratorState.EXHAUSTED)

    def test_states(self):
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        self.assertEqual(iterator.state, IteratorState.BUFFERED)
        iterator.next()
        iterator.next()
        self.assertEqual(iterator.state, IteratorState.EMPTY)
        iterator.has_next()
        self.assertEqual(iterator.state, IteratorState.BUFFERED)
        iterator.next()
        self.assertFalse(iterator.has_next())
        self.assertEqual(iterator.state, IteratorState.EXHAUSTED)

    def test_empty_first_page(self):
        lrs = FakeLrs({BASE_ADDRESS: PageResponse(content_type="application/json", body=b'{"statements": []}')})
        iterator = StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)
        self.assertFalse(iterator.has_next())
        self.assertEqual(list(iterator.stream()), [])

    def test_empty_object_page(self):
        lrs = FakeLrs({BASE_ADDRESS: PageResponse(content_type="application/json", body=b"{}")})
        iterator = StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)
        self.assertFalse(iterator.has_next())
        self.assertEqual(iterator.state, IteratorState.EXHAUSTED)

    def test_missing_body(self):
        for body in (None, b""):
            with self.subTest(body=body):
                lrs = FakeLrs({BASE_ADDRESS: PageResponse(content_type=None, body=body)})
                with self.assertRaises(MissingBodyError):
                    StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)

    def test_invalid_first_page(self):
        lrs = FakeLrs({BASE_ADDRESS: PageResponse(content_type="application/json", body=b'{"statements": 1}')})
        with self.assertRaises(DecodeError):
            StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)

    def test_skips_empty_pages_with_more(self):
        lrs = FakeLrs({
            BASE_ADDRESS: PageResponse(content_type="application/json",
                                       body=b'{"statements": [], "more": "/statements/more/0"}'),
            "https://lrs.example.com/statements/more/0": PageResponse(
                content_type="application/json", body=b'{"statements": [], "more": "/statements/more/1"}'),
            MORE_ADDRESS: _page("statements_page_2.json"),
        })
        iterator = StatementIterator.open(lrs.fetch_page, BASE_ADDRESS)
        self.assertEqual([statement.id for statement in iterator], _ids("0003"))
        self.assertEqual(len(lrs.fetched), 3)

    def test_failed_refill_can_be_retried(self):
        self.lrs.pages[MORE_ADDRESS] = TransportError("connection reset")
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        iterator.next()
        iterator.next()

        with self.assertRaises(TransportError):
            iterator.has_next()
        self.assertEqual(iterator.state, IteratorState.EMPTY)

        self.lrs.pages[MORE_ADDRESS] = _page("statements_page_2.json")
        self.assertTrue(iterator.has_next())
        self.assertEqual(iterator.next().id, _ids("0003")[0])
        self.assertEqual(self.lrs.fetched, [BASE_ADDRESS, MORE_ADDRESS, MORE_ADDRESS])

    def test_missing_body_on_refill(self):
        self.lrs.pages[MORE_ADDRESS] = PageResponse(content_type=None, body=None)
        iterator = StatementIterator.open(self.lrs.fetch_page, BASE_ADDRESS)
        iterator.next()
        iterator.next()
        with self.assertRaises(MissingBodyError):
            iterator.has_next()
        self.assertEqual(iterator.state, IteratorState.EMPTY)


if __name__ == '__main__':
    unittest.main()
