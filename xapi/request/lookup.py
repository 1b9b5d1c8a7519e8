# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Read-only lookups: everything the LRS knows about an agent or an activity, and about itself."""

from __future__ import annotations

from dataclasses import dataclass

from xapi.model.actor import ActorType
from xapi.request import Request, agent_param


@dataclass(slots=True, frozen=True)
class GetAgentsRequest(Request):
    """Fetches the Person object combining all identities of an agent."""

    agent: ActorType

    def path(self) -> str:
        return "agents"

    def query_params(self) -> dict[str, str]:
        return {"agent": agent_param(self.agent)}


@dataclass(slots=True, frozen=True)
class GetActivityRequest(Request):
    """Fetches the canonical definition of an activity."""

    activity_id: str

    def path(self) -> str:
        return "activities"

    def query_params(self) -> dict[str, str]:
        return {"activityId": self.activity_id}


@dataclass(slots=True, frozen=True)
class GetAboutRequest(Request):

    def path(self) -> str:
        return "about"
