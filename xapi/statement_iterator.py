# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Lazy iteration over all statements of a (paginated) statement query.

An LRS answers a statement query with a page of statements and,
if there are more, a `more` link to the next page.
`StatementIterator` hides the paging: it holds the statements of the
current page and only fetches the next page once those are used up.\
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Generator
from enum import StrEnum

from xapi.errors import NoMoreStatementsError
from xapi.log import get_child_logger
from xapi.model.statement import Statement
from xapi.model.statement_result import StatementResult
from xapi.request import resolve_more
from xapi.request.transport import PageResponse, require_body
from xapi.serializer import StatementDeserializer
from xapi.serializer.json_deserializer import JsonStatementDeserializer

log = get_child_logger("statement_iterator")

FetchPage = Callable[[str], PageResponse]


class IteratorState(StrEnum):
    EMPTY = "empty"
    """No statements buffered, but there may be more pages."""
    BUFFERED = "buffered"
    EXHAUSTED = "exhausted"


class StatementIterator:
    """Iterates the statements of a query, page by page.

    A page is only fetched when the statements of the previous one are used up,
    so stopping early never costs a fetch.
    Pages are fetched one at a time, strictly in the order of their `more` links.

    Instances are not thread-safe.

    Args:
        first_result (StatementResult): The already fetched first page.
        base_address (str): Address of the first request;
            `more` links are resolved against it.
        fetch_page (FetchPage): Fetches a page by its absolute address.
        deserializer (StatementDeserializer, optional): Decodes fetched pages.
    """

    def __init__(self,
                 first_result: StatementResult,
                 base_address: str,
                 fetch_page: FetchPage,
                 deserializer: StatementDeserializer | None = None) -> None:
        self._buffer: deque[Statement] = deque(first_result.statements)
        self._more: str | None = first_result.more
        self._base_address = base_address
        self._fetched = {base_address}
        self._fetch_page = fetch_page
        self._deserializer = deserializer or JsonStatementDeserializer()

    @classmethod
    def open(cls,
             fetch_page: FetchPage,
             address: str,
             deserializer: StatementDeserializer | None = None) -> StatementIterator:
        """Fetches the first page and creates an iterator from it.

        Raises:
            MissingBodyError: If the first response carries no body.
            DecodeError: If the first page is not a valid statement result.
        """
        deserializer = deserializer or JsonStatementDeserializer()
        first_result = cls._load_page(fetch_page, address, deserializer)
        return cls(first_result, address, fetch_page, deserializer)

    @staticmethod
    def _load_page(fetch_page: FetchPage, address: str, deserializer: StatementDeserializer) -> StatementResult:
        log.debug("fetching statements page '%s'", address)
        response = fetch_page(address)
        result = deserializer.deserialize_statement_result(require_body(response, address))
        log.debug("got %d statements (more: %s)", len(result.statements), result.more)
        return result

    @property
    def state(self) -> IteratorState:
        if self._buffer:
            return IteratorState.BUFFERED
        if self._more is not None:
            return IteratorState.EMPTY
        return IteratorState.EXHAUSTED

    def has_next(self) -> bool:
        """Tells whether there is another statement, fetching pages as needed.

        Pages without statements that still point to a further page are skipped.
        A `more` link back to an already fetched page ends the iteration.
        If a fetch fails, the error is raised and the iterator stays as it was,
        so calling `has_next()` again repeats the same fetch.
        """
        while not self._buffer:
            if self._more is None:
                return False
            address = resolve_more(self._base_address, self._more)
            if address in self._fetched:
                log.warning("'more' link '%s' points to an already fetched page, stopping", address)
                self._more = None
                return False
            page = self._load_page(self._fetch_page, address, self._deserializer)
            # only touch the state once the page is fully decoded
            self._fetched.add(address)
            self._buffer.extend(page.statements)
            self._more = page.more
        return True

    def next(self) -> Statement:
        """Returns the next statement, fetching the next page if the current one is used up.

        Raises:
            NoMoreStatementsError: If `has_next()` is false.
        """
        if not self.has_next():
            raise NoMoreStatementsError("no more statements")
        return self._buffer.popleft()

    def stream(self) -> Generator[Statement]:
        """Lazily yields the remaining statements."""
        while self.has_next():
            yield self.next()

    def __iter__(self) -> StatementIterator:
        return self

    def __next__(self) -> Statement:
        if not self.has_next():
            raise StopIteration
        return self.next()
