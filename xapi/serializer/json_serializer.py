# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from xapi.errors import SerializerError
from xapi.model.activity import Activity, ActivityDefinition, InteractionComponent
from xapi.model.actor import Account, Agent, Group
from xapi.model.attachment import Attachment
from xapi.model.context import Context, ContextActivities
from xapi.model.result import Result, Score
from xapi.model.statement import Statement, SubStatement
from xapi.model.statement_reference import StatementReference
from xapi.model.statement_result import StatementResult
from xapi.model.verb import Verb
from xapi.recursive_type import RecDict
from xapi.serializer import StatementSerializer
from xapi.serializer.util import format_timestamp, format_uuid, json_serialize


def _put(out: RecDict, key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


class JsonStatementSerializer(StatementSerializer):
    """Turns model entities into the JSON shape mandated by the xAPI specification.
    Fields that are not set are left out."""

    @classmethod
    def extensions(cls) -> list[str]:
        return ["json"]

    def serialize(self, entity, pretty: bool = False) -> str:
        return json_serialize(self.to_dict(entity), pretty=pretty)

    def to_dict(self, entity) -> RecDict | list[RecDict]:
        if isinstance(entity, Statement):
            return self.statement(entity)
        if isinstance(entity, StatementResult):
            return self.statement_result(entity)
        if isinstance(entity, (list, tuple)):
            return [self.to_dict(itm) for itm in entity]
        if isinstance(entity, (Activity, Agent, Group, StatementReference, SubStatement)):
            return self.statement_object(entity)
        if isinstance(entity, Verb):
            return self.verb(entity)
        if isinstance(entity, Context):
            return self.context(entity)
        if isinstance(entity, Result):
            return self.result(entity)
        raise SerializerError(f"Unable to serialize value of type '{type(entity).__name__}'")

    def statement_result(self, result: StatementResult) -> RecDict:
        out: RecDict = {"statements": [self.statement(statement) for statement in result.statements]}
        _put(out, "more", result.more)
        return out

    def statement(self, statement: Statement) -> RecDict:
        out: RecDict = {}
        _put(out, "id", format_uuid(statement.id) if statement.id is not None else None)
        self._core(out, statement)
        _put(out, "stored", format_timestamp(statement.stored) if statement.stored is not None else None)
        _put(out, "authority", self.actor(statement.authority) if statement.authority is not None else None)
        _put(out, "version", statement.version)
        _put(out, "attachments", self._attachments(statement.attachments))
        return out

    def sub_statement(self, sub_statement: SubStatement) -> RecDict:
        out: RecDict = {"objectType": str(sub_statement.object_type)}
        self._core(out, sub_statement)
        _put(out, "attachments", self._attachments(sub_statement.attachments))
        return out

    def _core(self, out: RecDict, statement: Statement | SubStatement) -> None:
        out["actor"] = self.actor(statement.actor)
        out["verb"] = self.verb(statement.verb)
        out["object"] = self.statement_object(statement.object)
        _put(out, "result", self.result(statement.result) if statement.result is not None else None)
        _put(out, "context", self.context(statement.context) if statement.context is not None else None)
        _put(out, "timestamp", format_timestamp(statement.timestamp) if statement.timestamp is not None else None)

    def _attachments(self, attachments: Iterable[Attachment] | None) -> list[RecDict] | None:
        if attachments is None:
            return None
        return [self.attachment(attachment) for attachment in attachments]

    def statement_object(self, obj) -> RecDict:
        if isinstance(obj, Activity):
            return self.activity(obj)
        if isinstance(obj, (Agent, Group)):
            return self.actor(obj)
        if isinstance(obj, StatementReference):
            return {"objectType": str(obj.object_type), "id": format_uuid(obj.id)}
        if isinstance(obj, SubStatement):
            return self.sub_statement(obj)
        raise SerializerError(f"Not a statement object: '{type(obj).__name__}'")

    def actor(self, actor: Agent | Group) -> RecDict:
        out: RecDict = {}
        _put(out, "objectType", str(actor.object_type) if actor.object_type is not None else None)
        _put(out, "name", actor.name)
        _put(out, "mbox", actor.mbox)
        _put(out, "mbox_sha1sum", actor.mbox_sha1sum)
        _put(out, "openid", actor.openid)
        _put(out, "account", self.account(actor.account) if actor.account is not None else None)
        if isinstance(actor, Group) and actor.member is not None:
            out["member"] = [self.actor(member) for member in actor.member]
        return out

    @staticmethod
    def account(account: Account) -> RecDict:
        return {"homePage": account.home_page, "name": account.name}

    @staticmethod
    def verb(verb: Verb) -> RecDict:
        out: RecDict = {"id": verb.id}
        _put(out, "display", dict(verb.display) if verb.display is not None else None)
        return out

    def activity(self, activity: Activity) -> RecDict:
        out: RecDict = {}
        _put(out, "objectType", str(activity.object_type) if activity.object_type is not None else None)
        out["id"] = activity.id
        _put(out, "definition", self.activity_definition(activity.definition)
             if activity.definition is not None else None)
        return out

    def activity_definition(self, definition: ActivityDefinition) -> RecDict:
        out: RecDict = {}
        _put(out, "name", dict(definition.name) if definition.name is not None else None)
        _put(out, "description", dict(definition.description) if definition.description is not None else None)
        _put(out, "type", definition.type)
        _put(out, "moreInfo", definition.more_info)
        _put(out, "interactionType",
             str(definition.interaction_type) if definition.interaction_type is not None else None)
        _put(out, "correctResponsesPattern",
             list(definition.correct_responses_pattern) if definition.correct_responses_pattern is not None else None)
        for name in ("choices", "scale", "source", "target", "steps"):
            components = getattr(definition, name)
            if components is not None:
                out[name] = [self.interaction_component(component) for component in components]
        _put(out, "extensions", dict(definition.extensions) if definition.extensions is not None else None)
        return out

    @staticmethod
    def interaction_component(component: InteractionComponent) -> RecDict:
        out: RecDict = {"id": component.id}
        _put(out, "description", dict(component.description) if component.description is not None else None)
        return out

    @staticmethod
    def score(score: Score) -> RecDict:
        out: RecDict = {}
        _put(out, "scaled", score.scaled)
        _put(out, "raw", score.raw)
        _put(out, "min", score.min)
        _put(out, "max", score.max)
        return out

    def result(self, result: Result) -> RecDict:
        out: RecDict = {}
        _put(out, "score", self.score(result.score) if result.score is not None else None)
        _put(out, "success", result.success)
        _put(out, "completion", result.completion)
        _put(out, "response", result.response)
        _put(out, "duration", result.duration)
        _put(out, "extensions", dict(result.extensions) if result.extensions is not None else None)
        return out

    def context(self, context: Context) -> RecDict:
        out: RecDict = {}
        _put(out, "registration", format_uuid(context.registration) if context.registration is not None else None)
        _put(out, "instructor", self.actor(context.instructor) if context.instructor is not None else None)
        _put(out, "team", self.actor(context.team) if context.team is not None else None)
        _put(out, "contextActivities", self.context_activities(context.context_activities)
             if context.context_activities is not None else None)
        _put(out, "revision", context.revision)
        _put(out, "platform", context.platform)
        _put(out, "language", context.language)
        _put(out, "statement", self.statement_object(context.statement) if context.statement is not None else None)
        _put(out, "extensions", dict(context.extensions) if context.extensions is not None else None)
        return out

    def context_activities(self, context_activities: ContextActivities) -> RecDict:
        out: RecDict = {}
        for name in ("parent", "grouping", "category", "other"):
            activities = getattr(context_activities, name)
            if activities is not None:
                out[name] = [self.activity(activity) for activity in activities]
        return out

    @staticmethod
    def attachment(attachment: Attachment) -> RecDict:
        out: RecDict = {"usageType": attachment.usage_type}
        _put(out, "display", dict(attachment.display) if attachment.display is not None else None)
        _put(out, "description", dict(attachment.description) if attachment.description is not None else None)
        _put(out, "contentType", attachment.content_type)
        _put(out, "length", attachment.length)
        _put(out, "sha2", attachment.sha2)
        _put(out, "fileUrl", attachment.file_url)
        return out
