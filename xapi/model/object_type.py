# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from enum import StrEnum


class ObjectType(StrEnum):
    """Values of the `objectType` discriminator field."""
    ACTIVITY = "Activity"
    AGENT = "Agent"
    GROUP = "Group"
    PERSON = "Person"
    STATEMENT_REF = "StatementRef"
    SUB_STATEMENT = "SubStatement"
