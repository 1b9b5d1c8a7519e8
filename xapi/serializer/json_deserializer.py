# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Turns xAPI JSON into model entities.

Statement objects are polymorphic; which variant to build is decided by a
single look at the `objectType` discriminator, before the rest of the shape is
parsed, because e.g. an anonymous Agent and an anonymous Group can not be told
apart by their fields alone.
Every failure is reported as a `DecodeError` carrying the path of the
offending field, e.g. `statements[2].object.objectType`.\
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from xapi.errors import DecodeError, ValidationError
from xapi.log import get_child_logger
from xapi.model.about import About
from xapi.model.activity import Activity, ActivityDefinition, InteractionComponent, InteractionType
from xapi.model.actor import Account, Agent, Group
from xapi.model.attachment import Attachment
from xapi.model.context import Context, ContextActivities
from xapi.model.object_type import ObjectType
from xapi.model.person import Person
from xapi.model.result import Result, Score
from xapi.model.statement import Statement, StatementObject, SubStatement, SubStatementObject
from xapi.model.statement_reference import StatementReference
from xapi.model.statement_result import StatementResult
from xapi.model.verb import Verb
from xapi.serializer import StatementDeserializer
from xapi.serializer.util import json_deserialize, parse_timestamp
from xapi.validator import join_path

log = get_child_logger("json_deserializer")

T = TypeVar("T")

_STATEMENT_FIELDS = {
    "id", "actor", "verb", "object", "result", "context", "timestamp", "stored", "authority", "version",
    "attachments"
}
_SUB_STATEMENT_FIELDS = {"objectType", "actor", "verb", "object", "result", "context", "timestamp", "attachments"}
_COMPONENT_FIELDS = ("choices", "scale", "source", "target", "steps")


def _index(path: str, idx: int) -> str:
    return f"{path}[{idx}]"


def _mapping(raw: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DecodeError(f"expected a JSON object, got '{type(raw).__name__}'", path)
    return raw


def _warn_unknown(raw: Mapping[str, Any], known: set[str], path: str) -> None:
    unknown = [key for key in raw if key not in known]
    if unknown:
        log.debug("ignoring unknown properties at '%s': %s", path or "<root>", ", ".join(unknown))


def _value(raw: Mapping[str, Any], key: str, path: str, types: tuple[type, ...], type_name: str,
           required: bool) -> Any:
    value = raw.get(key)
    if value is None:
        if required:
            raise DecodeError("missing required property", join_path(path, key))
        return None
    # bool is an int in Python, but not a number in JSON
    if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
        raise DecodeError(f"expected {type_name}, got '{type(value).__name__}'", join_path(path, key))
    return value


def _string(raw: Mapping[str, Any], key: str, path: str, required=False) -> str | None:
    return _value(raw, key, path, (str,), "a string", required)


def _boolean(raw: Mapping[str, Any], key: str, path: str) -> bool | None:
    return _value(raw, key, path, (bool,), "a boolean", False)


def _number(raw: Mapping[str, Any], key: str, path: str) -> float | int | None:
    return _value(raw, key, path, (int, float), "a number", False)


def _integer(raw: Mapping[str, Any], key: str, path: str) -> int | None:
    return _value(raw, key, path, (int,), "an integer", False)


def _list(raw: Mapping[str, Any], key: str, path: str) -> list[Any] | None:
    return _value(raw, key, path, (list,), "an array", False)


def _strings(raw: Mapping[str, Any], key: str, path: str) -> tuple[str, ...] | None:
    value = _list(raw, key, path)
    if value is None:
        return None
    for idx, itm in enumerate(value):
        if not isinstance(itm, str):
            raise DecodeError(f"expected a string, got '{type(itm).__name__}'", _index(join_path(path, key), idx))
    return tuple(value)


def _plain_mapping(raw: Mapping[str, Any], key: str, path: str) -> dict[str, Any] | None:
    value = _value(raw, key, path, (Mapping,), "an object", False)
    return dict(value) if value is not None else None


def _language_map(raw: Mapping[str, Any], key: str, path: str) -> dict[str, str] | None:
    value = _plain_mapping(raw, key, path)
    if value is None:
        return None
    for language, text in value.items():
        if not isinstance(text, str):
            raise DecodeError(f"expected a string, got '{type(text).__name__}'", join_path(path, key, language))
    return value


def _uuid(raw: Mapping[str, Any], key: str, path: str, required=False) -> UUID | None:
    value = _string(raw, key, path, required)
    if value is None:
        return None
    try:
        return UUID(value)
    except ValueError as err:
        raise DecodeError(f"invalid UUID '{value}'", join_path(path, key)) from err


def _timestamp(raw: Mapping[str, Any], key: str, path: str) -> datetime | None:
    value = _string(raw, key, path)
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as err:
        raise DecodeError(f"invalid ISO 8601 timestamp '{value}'", join_path(path, key)) from err


def _build(factory: Callable[..., T], path: str, **kwargs: Any) -> T:
    """Constructs an entity, reporting validation failures as decode failures at `path`."""
    try:
        return factory(**kwargs)
    except ValidationError as err:
        raise DecodeError("; ".join(err.reasons), path) from err


class JsonStatementDeserializer(StatementDeserializer):

    @classmethod
    def extensions(cls) -> list[str]:
        return ["json"]

    def deserialize(self, serialized: str | bytes) -> Statement:
        return self.statement(json_deserialize(serialized), "")

    def deserialize_statements(self, serialized: str | bytes) -> list[Statement]:
        """Decodes either a single statement or an array of statements."""
        raw = json_deserialize(serialized)
        if isinstance(raw, list):
            return [self.statement(itm, _index("", idx)) for idx, itm in enumerate(raw)]
        return [self.statement(raw, "")]

    def deserialize_statement_result(self, serialized: str | bytes) -> StatementResult:
        return self.statement_result(json_deserialize(serialized), "")

    def deserialize_ids(self, serialized: str | bytes) -> list[UUID]:
        """Decodes the array of statement ids returned when posting statements."""
        raw = json_deserialize(serialized)
        if not isinstance(raw, list):
            raise DecodeError(f"expected an array of statement ids, got '{type(raw).__name__}'")
        ids = []
        for idx, itm in enumerate(raw):
            try:
                ids.append(UUID(itm))
            except (TypeError, ValueError, AttributeError) as err:
                raise DecodeError(f"invalid UUID '{itm}'", _index("", idx)) from err
        return ids

    def deserialize_activity(self, serialized: str | bytes) -> Activity:
        return self.activity(json_deserialize(serialized), "")

    def deserialize_person(self, serialized: str | bytes) -> Person:
        return self.person(json_deserialize(serialized), "")

    def deserialize_about(self, serialized: str | bytes) -> About:
        return self.about(json_deserialize(serialized), "")

    def deserialize_document_ids(self, serialized: str | bytes) -> list[str]:
        """Decodes the array of ids returned when listing states or profiles."""
        raw = json_deserialize(serialized)
        if not isinstance(raw, list):
            raise DecodeError(f"expected an array of ids, got '{type(raw).__name__}'")
        for idx, itm in enumerate(raw):
            if not isinstance(itm, str):
                raise DecodeError(f"expected a string, got '{type(itm).__name__}'", _index("", idx))
        return raw

    def statement_result(self, raw: Any, path: str) -> StatementResult:
        # NOTE An empty object (`{}`) is technically invalid,
        #      but some LRSs answer like that when there are no statements.
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"statements", "more"}, path)
        raw_statements = _list(raw, "statements", path) or []
        statements_path = join_path(path, "statements")
        statements = [self.statement(itm, _index(statements_path, idx)) for idx, itm in enumerate(raw_statements)]
        return StatementResult(statements=tuple(statements), more=_string(raw, "more", path) or None)

    def statement(self, raw: Any, path: str) -> Statement:
        raw = _mapping(raw, path)
        _warn_unknown(raw, _STATEMENT_FIELDS, path)
        return _build(Statement,
                      path,
                      id=_uuid(raw, "id", path),
                      actor=self.actor(raw.get("actor"), join_path(path, "actor"), required=True),
                      verb=self.verb(raw.get("verb"), join_path(path, "verb")),
                      object=self.statement_object(raw.get("object"), join_path(path, "object")),
                      result=self.result(raw.get("result"), join_path(path, "result")),
                      context=self.context(raw.get("context"), join_path(path, "context")),
                      timestamp=_timestamp(raw, "timestamp", path),
                      stored=_timestamp(raw, "stored", path),
                      authority=self.actor(raw.get("authority"), join_path(path, "authority")),
                      version=_string(raw, "version", path),
                      attachments=self._attachments(raw, path))

    def sub_statement(self, raw: Mapping[str, Any], path: str) -> SubStatement:
        _warn_unknown(raw, _SUB_STATEMENT_FIELDS, path)
        return _build(SubStatement,
                      path,
                      actor=self.actor(raw.get("actor"), join_path(path, "actor"), required=True),
                      verb=self.verb(raw.get("verb"), join_path(path, "verb")),
                      object=self.sub_statement_object(raw.get("object"), join_path(path, "object")),
                      result=self.result(raw.get("result"), join_path(path, "result")),
                      context=self.context(raw.get("context"), join_path(path, "context")),
                      timestamp=_timestamp(raw, "timestamp", path),
                      attachments=self._attachments(raw, path))

    def statement_object(self, raw: Any, path: str) -> StatementObject:
        """Resolves the object of a top-level statement."""
        return self._resolve_object(raw, path, nested=False)

    def sub_statement_object(self, raw: Any, path: str) -> SubStatementObject:
        """Resolves the object of a SubStatement, which must not be a SubStatement itself."""
        return self._resolve_object(raw, path, nested=True)

    def _resolve_object(self, raw: Any, path: str, nested: bool) -> StatementObject:
        if raw is None:
            raise DecodeError("missing required property", path)
        raw = _mapping(raw, path)
        object_type = raw.get("objectType")
        if object_type is None or object_type == ObjectType.ACTIVITY:
            return self.activity(raw, path)
        if object_type == ObjectType.AGENT:
            return self.agent(raw, path)
        if object_type == ObjectType.GROUP:
            return self.group(raw, path)
        if object_type == ObjectType.STATEMENT_REF:
            return self.statement_reference(raw, path)
        if object_type == ObjectType.SUB_STATEMENT:
            if nested:
                raise DecodeError("a SubStatement must not contain a SubStatement", join_path(path, "objectType"))
            return self.sub_statement(raw, path)
        raise DecodeError(f"unknown objectType '{object_type}'", join_path(path, "objectType"))

    def actor(self, raw: Any, path: str, required=False) -> Agent | Group | None:
        if raw is None:
            if required:
                raise DecodeError("missing required property", path)
            return None
        raw = _mapping(raw, path)
        object_type = raw.get("objectType")
        if object_type is None or object_type == ObjectType.AGENT:
            return self.agent(raw, path)
        if object_type == ObjectType.GROUP:
            return self.group(raw, path)
        raise DecodeError(f"expected objectType 'Agent' or 'Group', got '{object_type}'",
                          join_path(path, "objectType"))

    def agent(self, raw: Any, path: str) -> Agent:
        raw = _mapping(raw, path)
        object_type = _string(raw, "objectType", path)
        if object_type is not None and object_type != ObjectType.AGENT:
            raise DecodeError(f"expected objectType 'Agent', got '{object_type}'", join_path(path, "objectType"))
        _warn_unknown(raw, {"objectType", "name", "mbox", "mbox_sha1sum", "openid", "account"}, path)
        return _build(Agent,
                      path,
                      object_type=object_type,
                      **self._actor_fields(raw, path))

    def group(self, raw: Mapping[str, Any], path: str) -> Group:
        _warn_unknown(raw, {"objectType", "name", "mbox", "mbox_sha1sum", "openid", "account", "member"}, path)
        raw_members = _list(raw, "member", path)
        members = None
        if raw_members is not None:
            members_path = join_path(path, "member")
            members = tuple(self.agent(itm, _index(members_path, idx)) for idx, itm in enumerate(raw_members))
        return _build(Group,
                      path,
                      object_type=_string(raw, "objectType", path),
                      member=members,
                      **self._actor_fields(raw, path))

    def _actor_fields(self, raw: Mapping[str, Any], path: str) -> dict[str, Any]:
        raw_account = raw.get("account")
        account = self.account(raw_account, join_path(path, "account")) if raw_account is not None else None
        return {
            "name": _string(raw, "name", path),
            "mbox": _string(raw, "mbox", path),
            "mbox_sha1sum": _string(raw, "mbox_sha1sum", path),
            "openid": _string(raw, "openid", path),
            "account": account,
        }

    def person(self, raw: Any, path: str) -> Person:
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"objectType", "name", "mbox", "mbox_sha1sum", "openid", "account"}, path)
        raw_accounts = _list(raw, "account", path)
        accounts = None
        if raw_accounts is not None:
            accounts_path = join_path(path, "account")
            accounts = tuple(self.account(itm, _index(accounts_path, idx)) for idx, itm in enumerate(raw_accounts))
        return _build(Person,
                      path,
                      object_type=_string(raw, "objectType", path) or ObjectType.PERSON,
                      name=_strings(raw, "name", path),
                      mbox=_strings(raw, "mbox", path),
                      mbox_sha1sum=_strings(raw, "mbox_sha1sum", path),
                      openid=_strings(raw, "openid", path),
                      account=accounts)

    def account(self, raw: Any, path: str) -> Account:
        raw = _mapping(raw, path)
        return _build(Account,
                      path,
                      home_page=_string(raw, "homePage", path, required=True),
                      name=_string(raw, "name", path, required=True))

    def about(self, raw: Any, path: str) -> About:
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"version", "extensions"}, path)
        version = _strings(raw, "version", path)
        if version is None:
            raise DecodeError("missing required property", join_path(path, "version"))
        return _build(About, path, version=version, extensions=_plain_mapping(raw, "extensions", path))

    def verb(self, raw: Any, path: str) -> Verb:
        if raw is None:
            raise DecodeError("missing required property", path)
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"id", "display"}, path)
        return _build(Verb,
                      path,
                      id=_string(raw, "id", path, required=True),
                      display=_language_map(raw, "display", path))

    def statement_reference(self, raw: Mapping[str, Any], path: str) -> StatementReference:
        _warn_unknown(raw, {"objectType", "id"}, path)
        return _build(StatementReference, path, id=_uuid(raw, "id", path, required=True))

    def activity(self, raw: Any, path: str, into: Activity | None = None) -> Activity:
        """Decodes an Activity.
        If `into` is given, the decoded definition is merged into the one of `into`
        (see `ActivityDefinition.merge`)."""
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"objectType", "id", "definition"}, path)
        activity = _build(Activity,
                          path,
                          id=_string(raw, "id", path, required=True),
                          definition=self.activity_definition(raw.get("definition"), join_path(path, "definition")),
                          object_type=_string(raw, "objectType", path))
        if into is not None:
            if into.id != activity.id:
                raise DecodeError(f"can not merge into activity '{into.id}'", join_path(path, "id"))
            return into.merge(activity)
        return activity

    def activity_definition(self,
                            raw: Any,
                            path: str,
                            into: ActivityDefinition | None = None) -> ActivityDefinition | None:
        """Decodes an ActivityDefinition.
        If `into` is given, the decoded definition is merged into it
        instead of replacing it."""
        if raw is None:
            return into
        raw = _mapping(raw, path)
        _warn_unknown(
            raw, {
                "name", "description", "type", "moreInfo", "interactionType", "correctResponsesPattern",
                "extensions", *_COMPONENT_FIELDS
            }, path)
        raw_interaction_type = _string(raw, "interactionType", path)
        interaction_type = None
        if raw_interaction_type is not None:
            try:
                interaction_type = InteractionType(raw_interaction_type)
            except ValueError as err:
                raise DecodeError(f"unknown interactionType '{raw_interaction_type}'",
                                  join_path(path, "interactionType")) from err
        raw_pattern = _list(raw, "correctResponsesPattern", path)
        if raw_pattern is not None and not all(isinstance(itm, str) for itm in raw_pattern):
            raise DecodeError("expected an array of strings", join_path(path, "correctResponsesPattern"))
        components = {name: self._interaction_components(raw, name, path) for name in _COMPONENT_FIELDS}
        definition = _build(ActivityDefinition,
                            path,
                            name=_language_map(raw, "name", path),
                            description=_language_map(raw, "description", path),
                            type=_string(raw, "type", path),
                            more_info=_string(raw, "moreInfo", path),
                            interaction_type=interaction_type,
                            correct_responses_pattern=tuple(raw_pattern) if raw_pattern is not None else None,
                            extensions=_plain_mapping(raw, "extensions", path),
                            **components)
        if into is not None:
            return into.merge(definition)
        return definition

    def _interaction_components(self, raw: Mapping[str, Any], key: str,
                                path: str) -> tuple[InteractionComponent, ...] | None:
        raw_components = _list(raw, key, path)
        if raw_components is None:
            return None
        components = []
        for idx, raw_component in enumerate(raw_components):
            component_path = _index(join_path(path, key), idx)
            raw_component = _mapping(raw_component, component_path)
            components.append(
                _build(InteractionComponent,
                       component_path,
                       id=_string(raw_component, "id", component_path, required=True),
                       description=_language_map(raw_component, "description", component_path)))
        return tuple(components)

    def result(self, raw: Any, path: str) -> Result | None:
        if raw is None:
            return None
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"score", "success", "completion", "response", "duration", "extensions"}, path)
        score = None
        raw_score = raw.get("score")
        if raw_score is not None:
            score_path = join_path(path, "score")
            raw_score = _mapping(raw_score, score_path)
            score = _build(Score,
                           score_path,
                           scaled=_number(raw_score, "scaled", score_path),
                           raw=_number(raw_score, "raw", score_path),
                           min=_number(raw_score, "min", score_path),
                           max=_number(raw_score, "max", score_path))
        return _build(Result,
                      path,
                      score=score,
                      success=_boolean(raw, "success", path),
                      completion=_boolean(raw, "completion", path),
                      response=_string(raw, "response", path),
                      duration=_string(raw, "duration", path),
                      extensions=_plain_mapping(raw, "extensions", path))

    def context(self, raw: Any, path: str) -> Context | None:
        if raw is None:
            return None
        raw = _mapping(raw, path)
        _warn_unknown(
            raw, {
                "registration", "instructor", "team", "contextActivities", "revision", "platform", "language",
                "statement", "extensions"
            }, path)
        team = None
        raw_team = raw.get("team")
        if raw_team is not None:
            team_path = join_path(path, "team")
            raw_team = _mapping(raw_team, team_path)
            if raw_team.get("objectType") != ObjectType.GROUP:
                raise DecodeError("expected objectType 'Group'", join_path(team_path, "objectType"))
            team = self.group(raw_team, team_path)
        statement = None
        raw_statement = raw.get("statement")
        if raw_statement is not None:
            statement_path = join_path(path, "statement")
            raw_statement = _mapping(raw_statement, statement_path)
            if raw_statement.get("objectType") != ObjectType.STATEMENT_REF:
                raise DecodeError("expected objectType 'StatementRef'", join_path(statement_path, "objectType"))
            statement = self.statement_reference(raw_statement, statement_path)
        return _build(Context,
                      path,
                      registration=_uuid(raw, "registration", path),
                      instructor=self.actor(raw.get("instructor"), join_path(path, "instructor")),
                      team=team,
                      context_activities=self.context_activities(raw.get("contextActivities"),
                                                                 join_path(path, "contextActivities")),
                      revision=_string(raw, "revision", path),
                      platform=_string(raw, "platform", path),
                      language=_string(raw, "language", path),
                      statement=statement,
                      extensions=_plain_mapping(raw, "extensions", path))

    def context_activities(self, raw: Any, path: str) -> ContextActivities | None:
        if raw is None:
            return None
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"parent", "grouping", "category", "other"}, path)
        kinds: dict[str, tuple[Activity, ...] | None] = {}
        for name in ("parent", "grouping", "category", "other"):
            value = raw.get(name)
            kind_path = join_path(path, name)
            if value is None:
                kinds[name] = None
            elif isinstance(value, Mapping):
                # xAPI 1.0.0 allowed a single activity instead of an array
                kinds[name] = (self._context_activity(value, kind_path),)
            elif isinstance(value, list):
                kinds[name] = tuple(
                    self._context_activity(itm, _index(kind_path, idx)) for idx, itm in enumerate(value))
            else:
                raise DecodeError(f"expected an array, got '{type(value).__name__}'", kind_path)
        return _build(ContextActivities, path, **kinds)

    def _context_activity(self, raw: Any, path: str) -> Activity:
        raw = _mapping(raw, path)
        object_type = raw.get("objectType")
        if object_type is not None and object_type != ObjectType.ACTIVITY:
            raise DecodeError(f"expected objectType 'Activity', got '{object_type}'", join_path(path, "objectType"))
        return self.activity(raw, path)

    def _attachments(self, raw: Mapping[str, Any], path: str) -> tuple[Attachment, ...] | None:
        raw_attachments = _list(raw, "attachments", path)
        if raw_attachments is None:
            return None
        attachments_path = join_path(path, "attachments")
        return tuple(
            self.attachment(itm, _index(attachments_path, idx)) for idx, itm in enumerate(raw_attachments))

    def attachment(self, raw: Any, path: str) -> Attachment:
        raw = _mapping(raw, path)
        _warn_unknown(raw, {"usageType", "display", "description", "contentType", "length", "sha2", "fileUrl"}, path)
        return _build(Attachment,
                      path,
                      usage_type=_string(raw, "usageType", path, required=True),
                      display=_language_map(raw, "display", path),
                      description=_language_map(raw, "description", path),
                      content_type=_string(raw, "contentType", path),
                      length=_integer(raw, "length", path),
                      sha2=_string(raw, "sha2", path),
                      file_url=_string(raw, "fileUrl", path))
