# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from xapi.config import Config
from xapi.log import get_child_logger
from xapi.model.about import About
from xapi.model.activity import Activity
from xapi.model.actor import ActorType
from xapi.model.person import Person
from xapi.model.statement import Statement
from xapi.model.statement_result import StatementResult
from xapi.request import (GetMoreStatementsRequest, GetStatementRequest, GetStatementsRequest,
                          GetVoidedStatementRequest, PostStatementsRequest, PutStatementRequest, Request)
from xapi.request.document import (JSON_CONTENT_TYPE, DeleteActivityProfileRequest, DeleteAgentProfileRequest,
                                    DeleteStateRequest, DeleteStatesRequest, Document, GetActivityProfileRequest,
                                    GetActivityProfilesRequest, GetAgentProfileRequest, GetAgentProfilesRequest,
                                    GetStateRequest, GetStatesRequest, PostActivityProfileRequest,
                                    PostAgentProfileRequest, PostStateRequest, PutActivityProfileRequest,
                                    PutAgentProfileRequest, PutStateRequest)
from xapi.request.lookup import GetAboutRequest, GetActivityRequest, GetAgentsRequest
from xapi.request.transport import PageResponse, RequestsTransport, Transport, require_body
from xapi.serializer.json_deserializer import JsonStatementDeserializer
from xapi.statement_iterator import StatementIterator

log = get_child_logger("client")


class XapiClient:
    """Talks to the resources of a single LRS.

    Args:
        endpoint (str): Base URL of the LRS, e.g. `https://lrs.example.com/xapi/`.
        transport (Transport): Does the actual HTTP.
    """

    def __init__(self, endpoint: str, transport: Transport) -> None:
        self._endpoint = endpoint
        self._transport = transport
        self._deserializer = JsonStatementDeserializer()

    @classmethod
    def from_config(cls, config: Config) -> XapiClient:
        return cls(config.endpoint, RequestsTransport(config))

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _execute(self, request: Request) -> PageResponse:
        return self._transport.send(request.METHOD, request.url(self._endpoint), request.body(), request.content_type())

    def _fetch_body(self, request: Request) -> bytes:
        address = request.url(self._endpoint)
        return require_body(self._transport.fetch_page(address), address)

    def get_statement(self, request: GetStatementRequest | UUID) -> Statement:
        if isinstance(request, UUID):
            request = GetStatementRequest(id=request)
        return self._deserializer.deserialize(self._fetch_body(request))

    def get_voided_statement(self, request: GetVoidedStatementRequest | UUID) -> Statement:
        if isinstance(request, UUID):
            request = GetVoidedStatementRequest(id=request)
        return self._deserializer.deserialize(self._fetch_body(request))

    def get_statements(self, request: GetStatementsRequest | None = None) -> StatementResult:
        """Fetches the first page of a statement query."""
        request = request or GetStatementsRequest()
        return self._deserializer.deserialize_statement_result(self._fetch_body(request))

    def get_more_statements(self, request: GetMoreStatementsRequest | str) -> StatementResult:
        """Fetches the page a `more` link points to."""
        if isinstance(request, str):
            request = GetMoreStatementsRequest(more=request)
        return self._deserializer.deserialize_statement_result(self._fetch_body(request))

    def get_statement_iterator(self, request: GetStatementsRequest | None = None) -> StatementIterator:
        """Fetches the first page of a statement query and returns an iterator
        that fetches the following pages on demand."""
        request = request or GetStatementsRequest()
        return StatementIterator.open(self._transport.fetch_page, request.url(self._endpoint), self._deserializer)

    def post_statement(self, statement: Statement) -> UUID:
        """Stores a single statement and returns its id (as assigned by the LRS, if it had none)."""
        return self.post_statements([statement])[0]

    def post_statements(self, statements: Sequence[Statement]) -> list[UUID]:
        if not statements:
            raise ValueError("Nothing to post")
        request = PostStatementsRequest(statements=tuple(statements))
        response = self._execute(request)
        ids = self._deserializer.deserialize_ids(require_body(response, request.url(self._endpoint)))
        log.info("Stored %d statement(s)", len(ids))
        return ids

    def put_statement(self, statement: Statement) -> None:
        """Stores a statement under its own id; the LRS answers without a body."""
        self._execute(PutStatementRequest(statement=statement))

    def void_statement(self, statement: Statement) -> UUID:
        """Posts the statement voiding the given one and returns the id of the voiding statement."""
        return self.post_statement(statement.voiding())

    def _fetch_document(self, request: Request) -> Document:
        response = self._execute(request)
        return Document(response.body or b"", response.content_type or JSON_CONTENT_TYPE)

    def _fetch_document_ids(self, request: Request) -> list[str]:
        return self._deserializer.deserialize_document_ids(self._fetch_body(request))

    def get_state(self, request: GetStateRequest) -> Document:
        return self._fetch_document(request)

    def get_states(self, request: GetStatesRequest) -> list[str]:
        """Lists the ids of the stored states."""
        return self._fetch_document_ids(request)

    def put_state(self, request: PutStateRequest) -> None:
        self._execute(request)

    def post_state(self, request: PostStateRequest) -> None:
        self._execute(request)

    def delete_state(self, request: DeleteStateRequest) -> None:
        self._execute(request)

    def delete_states(self, request: DeleteStatesRequest) -> None:
        self._execute(request)
        log.info("Deleted the states of activity '%s'", request.activity_id)

    def get_agent_profile(self, request: GetAgentProfileRequest) -> Document:
        return self._fetch_document(request)

    def get_agent_profiles(self, request: GetAgentProfilesRequest | ActorType) -> list[str]:
        if not isinstance(request, GetAgentProfilesRequest):
            request = GetAgentProfilesRequest(agent=request)
        return self._fetch_document_ids(request)

    def put_agent_profile(self, request: PutAgentProfileRequest) -> None:
        self._execute(request)

    def post_agent_profile(self, request: PostAgentProfileRequest) -> None:
        self._execute(request)

    def delete_agent_profile(self, request: DeleteAgentProfileRequest) -> None:
        self._execute(request)

    def get_activity_profile(self, request: GetActivityProfileRequest) -> Document:
        return self._fetch_document(request)

    def get_activity_profiles(self, request: GetActivityProfilesRequest | str) -> list[str]:
        if isinstance(request, str):
            request = GetActivityProfilesRequest(activity_id=request)
        return self._fetch_document_ids(request)

    def put_activity_profile(self, request: PutActivityProfileRequest) -> None:
        self._execute(request)

    def post_activity_profile(self, request: PostActivityProfileRequest) -> None:
        self._execute(request)

    def delete_activity_profile(self, request: DeleteActivityProfileRequest) -> None:
        self._execute(request)

    def get_agents(self, request: GetAgentsRequest | ActorType) -> Person:
        """Fetches all identities the LRS knows for an agent."""
        if not isinstance(request, GetAgentsRequest):
            request = GetAgentsRequest(agent=request)
        return self._deserializer.deserialize_person(self._fetch_body(request))

    def get_activity(self, request: GetActivityRequest | str) -> Activity:
        if isinstance(request, str):
            request = GetActivityRequest(activity_id=request)
        return self._deserializer.deserialize_activity(self._fetch_body(request))

    def get_about(self) -> About:
        return self._deserializer.deserialize_about(self._fetch_body(GetAboutRequest()))
