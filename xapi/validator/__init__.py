# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Cross-field checks run while the model entities are constructed.

Every `check_*` function returns a (possibly empty) list of violations,
so an entity can run all of its checks and report every failure at once.
The checks never import the model; statement-object variants are told apart
by their `KIND` class constant.\
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse
from uuid import UUID

import validators
from langcodes import tag_is_valid

from xapi.errors import ValidationError, Violation
from xapi.model.object_type import ObjectType

_sha1_pattern = re.compile(r"^[a-f0-9]{40}$")
_version_pattern = re.compile(r"^1\.0(\.\d+)?$")
_sha256_pattern = re.compile(r"^[A-Fa-f0-9]{64}$")
_MAILTO = "mailto:"
_IDENTIFIERS = ("mbox", "mbox_sha1sum", "openid", "account")


@validators.utils.validator
def has_scheme(value):
    """Return whether or not given value is a URI with a non-empty scheme."""
    return isinstance(value, str) and bool(urlparse(value).scheme)


@validators.utils.validator
def is_mbox(value):
    """Return whether or not given value is a `mailto:` URI of a valid email address."""
    return isinstance(value, str) and value.startswith(_MAILTO) and validators.email(value[len(_MAILTO):])


@validators.utils.validator
def is_sha1_hash(value):
    """Return whether or not given value is a lower-case hex SHA1 hash."""
    return isinstance(value, str) and bool(_sha1_pattern.match(value))


@validators.utils.validator
def is_sha256_hash(value):
    """Return whether or not given value is a hex SHA256 hash."""
    return isinstance(value, str) and bool(_sha256_pattern.match(value))


@validators.utils.validator
def is_bcp_47_language_tag(value):
    """Return whether or not given value is a valid BCP 47 language tag."""
    return isinstance(value, str) and tag_is_valid(value)


@validators.utils.validator
def is_xapi_version(value):
    return isinstance(value, str) and bool(_version_pattern.match(value))


def join_path(*parts: str) -> str:
    return ".".join(part for part in parts if part)


def ensure_valid(entity: object, violations: list[Violation]) -> None:
    """Raises a `ValidationError` listing all violations, if there are any."""
    if violations:
        raise ValidationError(
            f"invalid {type(entity).__name__}: {'; '.join(str(violation) for violation in violations)}",
            violations)


def kind_of(value: Any) -> ObjectType | None:
    return getattr(type(value), "KIND", None)


def check_required(path: str, value: Any) -> list[Violation]:
    if value is None:
        return [Violation(path, "must not be null")]
    return []


def check_has_scheme(path: str, value: Any, missing_ok=False) -> list[Violation]:
    if value is None:
        if missing_ok:
            return []
        return [Violation(path, "must not be null")]
    if not isinstance(value, str):
        return [Violation(path, f"must be of type 'str'(ing), but is '{type(value).__name__}'")]
    if not has_scheme(value):
        return [Violation(path, "must have a scheme")]
    return []


def check_uuid(path: str, value: Any, missing_ok=False) -> list[Violation]:
    if value is None:
        if missing_ok:
            return []
        return [Violation(path, "must not be null")]
    if not isinstance(value, UUID):
        return [Violation(path, f"must be a UUID, but is '{value}'")]
    return []


def check_language_map(path: str, value: Any, missing_ok=True) -> list[Violation]:
    if value is None:
        if missing_ok:
            return []
        return [Violation(path, "must not be null")]
    if not isinstance(value, Mapping):
        return [Violation(path, f"must be a language map, but is '{type(value).__name__}'")]
    reasons = []
    for language, text in value.items():
        if not isinstance(language, str) or not language:
            reasons.append(Violation(path, f"invalid language tag '{language}'"))
        if not isinstance(text, str):
            reasons.append(Violation(join_path(path, str(language)), "must be of type 'str'(ing)"))
    return reasons


def check_extensions(path: str, value: Any) -> list[Violation]:
    if value is None:
        return []
    if not isinstance(value, Mapping):
        return [Violation(path, f"must be a mapping, but is '{type(value).__name__}'")]
    reasons = []
    for key in value:
        if not has_scheme(key):
            reasons.append(Violation(path, f"extension key '{key}' must have a scheme"))
    return reasons


def check_identifiers(path: str, actor: Any, required: bool) -> list[Violation]:
    """At most one identifier is always enforced,
    exactly one only if `required` is set."""
    present = [name for name in _IDENTIFIERS if getattr(actor, name, None) is not None]
    if len(present) > 1:
        return [Violation(path, f"must not have more than one identifier, but has {', '.join(present)}")]
    if required and not present:
        return [Violation(path, "must have exactly one identifier (mbox, mbox_sha1sum, openid or account)")]
    return []


def check_identifier_formats(path: str, actor: Any) -> list[Violation]:
    reasons = []
    if actor.mbox is not None and not is_mbox(actor.mbox):
        reasons.append(Violation(join_path(path, "mbox"), f"must be a 'mailto:' email URI, but is '{actor.mbox}'"))
    if actor.mbox_sha1sum is not None and not is_sha1_hash(actor.mbox_sha1sum):
        reasons.append(Violation(join_path(path, "mbox_sha1sum"), "must be a lower-case hex SHA1 hash"))
    reasons.extend(check_has_scheme(join_path(path, "openid"), actor.openid, missing_ok=True))
    return reasons


def check_valid_actor(path: str, actor: Any) -> list[Violation]:
    """An Agent may only carry the 'Agent' object type and must be identified;
    a Group always carries 'Group' and may be anonymous."""
    kind = kind_of(actor)
    if kind == ObjectType.AGENT:
        reasons = []
        if actor.object_type is not None and actor.object_type != ObjectType.AGENT:
            reasons.append(Violation(join_path(path, "objectType"),
                                     f"must be '{ObjectType.AGENT}', but is '{actor.object_type}'"))
        reasons.extend(check_identifiers(path, actor, required=True))
        return reasons
    if kind == ObjectType.GROUP:
        if actor.object_type != ObjectType.GROUP:
            return [Violation(join_path(path, "objectType"),
                              f"must be '{ObjectType.GROUP}', but is '{actor.object_type}'")]
        return []
    if actor is None:
        return [Violation(path, "must not be null")]
    return [Violation(path, f"must be an Agent or a Group, but is '{type(actor).__name__}'")]


def check_statement_object(path: str, obj: Any, allow_sub_statement: bool) -> list[Violation]:
    if obj is None:
        return [Violation(path, "must not be null")]
    kind = kind_of(obj)
    if kind is None:
        return [Violation(path, f"must be a statement object, but is '{type(obj).__name__}'")]
    if kind == ObjectType.SUB_STATEMENT and not allow_sub_statement:
        return [Violation(path, "a SubStatement must not contain a SubStatement")]
    if kind in (ObjectType.AGENT, ObjectType.GROUP):
        return check_valid_actor(path, obj)
    return []


def check_statement_platform(statement: Any) -> list[Violation]:
    """`context.platform` may only be set if the object is an Activity."""
    context = statement.context
    if context is not None and context.platform is not None and kind_of(statement.object) != ObjectType.ACTIVITY:
        return [Violation("context.platform", "invalid Statement Platform (Object must be an Activity)")]
    return []


def check_statement_revision(statement: Any) -> list[Violation]:
    """`context.revision` may only be set if the object is an Activity."""
    context = statement.context
    if context is not None and context.revision is not None and kind_of(statement.object) != ObjectType.ACTIVITY:
        return [Violation("context.revision", "invalid Statement Revision (Object must be an Activity)")]
    return []


class Validator:

    def validate(self, statement) -> tuple[bool, list[str]]:
        raise NotImplementedError()
