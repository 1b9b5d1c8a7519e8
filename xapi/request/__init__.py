# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Requests against the resources of an LRS: statements here, documents and lookups
in the `document` and `lookup` modules.

Each request is a fixed mapping to an HTTP method, a path relative to the
LRS endpoint and a set of query parameters; the body, where there is one,
is produced by the client.
Query parameters are emitted in a fixed order and encoded with `%20` for
spaces, as most LRSs expect.\
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from urllib.parse import quote, urlencode, urljoin, urlsplit, urlunsplit
from uuid import UUID

from xapi.log import get_child_logger
from xapi.model.actor import ActorType
from xapi.model.statement import Statement
from xapi.model.verb import Verb
from xapi.serializer.json_serializer import JsonStatementSerializer
from xapi.serializer.util import format_timestamp, format_uuid, json_serialize

log = get_child_logger("request")

STATEMENTS_PATH = "statements"


class StatementFormat(StrEnum):
    EXACT = "exact"
    IDS = "ids"
    CANONICAL = "canonical"


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def agent_param(agent: ActorType) -> str:
    """Agents in query parameters are compact JSON of the agent."""
    return json_serialize(JsonStatementSerializer().actor(agent))


def endpoint_url(endpoint: str, path: str) -> str:
    """Appends `path` to the endpoint, keeping any path prefix of the endpoint (e.g. `/xapi/`)."""
    if not endpoint.endswith("/"):
        endpoint += "/"
    return urljoin(endpoint, path)


def resolve_more(base_address: str, more: str) -> str:
    """The address a `more` link points to: its path and query on the origin
    (scheme, host and port) of `base_address`. Links to other origins are never followed."""
    base = urlsplit(base_address)
    link = urlsplit(urljoin(base_address, more))
    if (link.scheme, link.netloc) != (base.scheme, base.netloc):
        log.warning("'more' link '%s' points to another origin, using '%s' instead", more, base.netloc)
    return urlunsplit((base.scheme, base.netloc, link.path, link.query, ""))


class Request:
    """Interface of a single LRS request."""

    METHOD: str = "GET"

    def path(self) -> str:
        return STATEMENTS_PATH

    def query_params(self) -> dict[str, str]:
        return {}

    def url(self, endpoint: str) -> str:
        url = endpoint_url(endpoint, self.path())
        params = self.query_params()
        if params:
            url += "?" + urlencode(params, quote_via=quote, safe="")
        return url

    def body(self) -> str | bytes | None:
        return None

    def content_type(self) -> str | None:
        """Type of the body; `None` for JSON."""
        return None


@dataclass(slots=True, frozen=True)
class GetStatementRequest(Request):
    """Fetches a single statement by id."""

    id: UUID
    format: StatementFormat | None = None
    attachments: bool | None = None

    def query_params(self) -> dict[str, str]:
        params = {"statementId": format_uuid(self.id)}
        if self.format is not None:
            params["format"] = str(self.format)
        if self.attachments is not None:
            params["attachments"] = _bool_param(self.attachments)
        return params


@dataclass(slots=True, frozen=True)
class GetVoidedStatementRequest(Request):
    """Fetches a single voided statement by id.
    Voided statements are never returned by `GetStatementRequest`."""

    id: UUID
    format: StatementFormat | None = None
    attachments: bool | None = None

    def query_params(self) -> dict[str, str]:
        params = {"voidedStatementId": format_uuid(self.id)}
        if self.format is not None:
            params["format"] = str(self.format)
        if self.attachments is not None:
            params["attachments"] = _bool_param(self.attachments)
        return params


@dataclass(slots=True, frozen=True)
class GetStatementsRequest(Request):  # pylint: disable=too-many-instance-attributes
    """Queries statements; the answer is a page, see `StatementResult`."""

    agent: ActorType | None = None
    verb: Verb | str | None = None
    activity: str | None = None
    since: datetime | None = None
    until: datetime | None = None
    registration: UUID | None = None
    related_activities: bool | None = None
    related_agents: bool | None = None
    limit: int | None = None
    format: StatementFormat | None = None
    attachments: bool | None = None
    ascending: bool | None = None

    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.agent is not None:
            params["agent"] = agent_param(self.agent)
        if self.verb is not None:
            params["verb"] = self.verb.id if isinstance(self.verb, Verb) else self.verb
        if self.activity is not None:
            params["activity"] = self.activity
        if self.since is not None:
            params["since"] = format_timestamp(self.since)
        if self.until is not None:
            params["until"] = format_timestamp(self.until)
        if self.registration is not None:
            params["registration"] = format_uuid(self.registration)
        if self.related_activities is not None:
            params["related_activities"] = _bool_param(self.related_activities)
        if self.related_agents is not None:
            params["related_agents"] = _bool_param(self.related_agents)
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.format is not None:
            params["format"] = str(self.format)
        if self.attachments is not None:
            params["attachments"] = _bool_param(self.attachments)
        if self.ascending is not None:
            params["ascending"] = _bool_param(self.ascending)
        return params


@dataclass(slots=True, frozen=True)
class GetMoreStatementsRequest(Request):
    """Follows the `more` link of a page.

    The link is usually relative to the origin of the LRS (not to its endpoint),
    so it is resolved against the scheme, host and port of the endpoint.
    Absolute links keep only their path and query, see `resolve_more`.
    """

    more: str

    def url(self, endpoint: str) -> str:
        return resolve_more(endpoint, self.more)


@dataclass(slots=True, frozen=True)
class PostStatementsRequest(Request):
    """Stores one or more statements; the LRS answers with their ids."""

    METHOD = "POST"

    statements: Sequence[Statement] = field(default_factory=tuple)

    def body(self) -> str:
        return JsonStatementSerializer().serialize(list(self.statements))


@dataclass(slots=True, frozen=True)
class PutStatementRequest(Request):
    """Stores a single statement under the given id."""

    METHOD = "PUT"

    statement: Statement

    def query_params(self) -> dict[str, str]:
        if self.statement.id is None:
            raise ValueError("Can only put a statement with an id")
        return {"statementId": format_uuid(self.statement.id)}

    def body(self) -> str:
        return JsonStatementSerializer().serialize(self.statement)

