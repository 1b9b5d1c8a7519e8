# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Requests against the document resources of an LRS: activity states,
agent profiles and activity profiles.

The LRS stores documents as they are, whatever their content type. JSON
documents are special in one way only: POSTing one merges its top level
properties into the stored document instead of replacing it.\
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from xapi.model.actor import ActorType
from xapi.request import Request, agent_param
from xapi.serializer.util import format_timestamp, format_uuid, json_deserialize, json_serialize

STATE_PATH = "activities/state"
AGENT_PROFILE_PATH = "agents/profile"
ACTIVITY_PROFILE_PATH = "activities/profile"

JSON_CONTENT_TYPE = "application/json"


@dataclass(slots=True, frozen=True)
class Document:
    """A state or profile document: raw content and its type."""

    content: bytes
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def of(cls, value: Any, content_type: str | None = None) -> Document:
        """Wraps a value as a document.

        Bytes are kept as they are. Any other value is written as JSON, unless
        a non-JSON `content_type` is given, in which case it is written as text.
        """
        if isinstance(value, Document):
            return value
        if isinstance(value, bytes):
            return cls(value, content_type or "application/octet-stream")
        if content_type is None or _is_json(content_type):
            return cls(json_serialize(value).encode("utf-8"), content_type or JSON_CONTENT_TYPE)
        return cls(str(value).encode("utf-8"), content_type)

    def is_json(self) -> bool:
        return _is_json(self.content_type)

    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json_deserialize(self.content)


def _is_json(content_type: str | None) -> bool:
    return content_type is not None and content_type.split(";")[0].strip().lower() == JSON_CONTENT_TYPE


def _require(name: str, value: str | None) -> None:
    if not value:
        raise ValueError(f"'{name}' must not be empty")


class _WritesDocument:
    """Body of requests storing a document."""

    # pylint: disable=no-member
    def body(self) -> bytes:
        return self.document.content

    def content_type(self) -> str:
        return self.document.content_type


def _state_params(activity_id: str,
                  agent: ActorType,
                  registration: UUID | None,
                  state_id: str | None = None,
                  since: datetime | None = None) -> dict[str, str]:
    params = {"activityId": activity_id, "agent": agent_param(agent)}
    if registration is not None:
        params["registration"] = format_uuid(registration)
    if state_id is not None:
        params["stateId"] = state_id
    if since is not None:
        params["since"] = format_timestamp(since)
    return params


@dataclass(slots=True, frozen=True)
class GetStateRequest(Request):
    """Fetches a single state document."""

    activity_id: str
    agent: ActorType
    state_id: str
    registration: UUID | None = None

    def __post_init__(self) -> None:
        _require("stateId", self.state_id)

    def path(self) -> str:
        return STATE_PATH

    def query_params(self) -> dict[str, str]:
        return _state_params(self.activity_id, self.agent, self.registration, self.state_id)


@dataclass(slots=True, frozen=True)
class PutStateRequest(_WritesDocument, Request):
    """Stores a state document, replacing any stored one."""

    METHOD = "PUT"

    activity_id: str
    agent: ActorType
    state_id: str
    document: Document
    registration: UUID | None = None

    def __post_init__(self) -> None:
        _require("stateId", self.state_id)

    def path(self) -> str:
        return STATE_PATH

    def query_params(self) -> dict[str, str]:
        return _state_params(self.activity_id, self.agent, self.registration, self.state_id)


@dataclass(slots=True, frozen=True)
class PostStateRequest(PutStateRequest):
    """Stores a state document, merging a JSON document into the stored one."""

    METHOD = "POST"


@dataclass(slots=True, frozen=True)
class DeleteStateRequest(GetStateRequest):
    """Deletes a single state document."""

    METHOD = "DELETE"


@dataclass(slots=True, frozen=True)
class GetStatesRequest(Request):
    """Lists the ids of the state documents of an activity and agent,
    optionally only those stored after `since`."""

    activity_id: str
    agent: ActorType
    registration: UUID | None = None
    since: datetime | None = None

    def path(self) -> str:
        return STATE_PATH

    def query_params(self) -> dict[str, str]:
        return _state_params(self.activity_id, self.agent, self.registration, since=self.since)


@dataclass(slots=True, frozen=True)
class DeleteStatesRequest(Request):
    """Deletes all state documents of an activity and agent."""

    METHOD = "DELETE"

    activity_id: str
    agent: ActorType
    registration: UUID | None = None

    def path(self) -> str:
        return STATE_PATH

    def query_params(self) -> dict[str, str]:
        return _state_params(self.activity_id, self.agent, self.registration)


@dataclass(slots=True, frozen=True)
class GetAgentProfileRequest(Request):

    agent: ActorType
    profile_id: str

    def __post_init__(self) -> None:
        _require("profileId", self.profile_id)

    def path(self) -> str:
        return AGENT_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        return {"agent": agent_param(self.agent), "profileId": self.profile_id}


@dataclass(slots=True, frozen=True)
class DeleteAgentProfileRequest(GetAgentProfileRequest):

    METHOD = "DELETE"


@dataclass(slots=True, frozen=True)
class PutAgentProfileRequest(_WritesDocument, Request):

    METHOD = "PUT"

    agent: ActorType
    profile_id: str
    document: Document

    def __post_init__(self) -> None:
        _require("profileId", self.profile_id)

    def path(self) -> str:
        return AGENT_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        return {"agent": agent_param(self.agent), "profileId": self.profile_id}


@dataclass(slots=True, frozen=True)
class PostAgentProfileRequest(PutAgentProfileRequest):
    """Merges a JSON document into the stored agent profile."""

    METHOD = "POST"


@dataclass(slots=True, frozen=True)
class GetAgentProfilesRequest(Request):
    """Lists the profile ids of an agent, optionally only those stored after `since`."""

    agent: ActorType
    since: datetime | None = None

    def path(self) -> str:
        return AGENT_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        params = {"agent": agent_param(self.agent)}
        if self.since is not None:
            params["since"] = format_timestamp(self.since)
        return params


@dataclass(slots=True, frozen=True)
class GetActivityProfileRequest(Request):

    activity_id: str
    profile_id: str

    def __post_init__(self) -> None:
        _require("profileId", self.profile_id)

    def path(self) -> str:
        return ACTIVITY_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        return {"activityId": self.activity_id, "profileId": self.profile_id}


@dataclass(slots=True, frozen=True)
class DeleteActivityProfileRequest(GetActivityProfileRequest):

    METHOD = "DELETE"


@dataclass(slots=True, frozen=True)
class PutActivityProfileRequest(_WritesDocument, Request):

    METHOD = "PUT"

    activity_id: str
    profile_id: str
    document: Document

    def __post_init__(self) -> None:
        _require("profileId", self.profile_id)

    def path(self) -> str:
        return ACTIVITY_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        return {"activityId": self.activity_id, "profileId": self.profile_id}


@dataclass(slots=True, frozen=True)
class PostActivityProfileRequest(PutActivityProfileRequest):
    """Merges a JSON document into the stored activity profile."""

    METHOD = "POST"


@dataclass(slots=True, frozen=True)
class GetActivityProfilesRequest(Request):
    """Lists the profile ids of an activity, optionally only those stored after `since`."""

    activity_id: str
    since: datetime | None = None

    def path(self) -> str:
        return ACTIVITY_PROFILE_PATH

    def query_params(self) -> dict[str, str]:
        params = {"activityId": self.activity_id}
        if self.since is not None:
            params["since"] = format_timestamp(self.since)
        return params
