# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Any, Union

# any JSON value
RecVal = Union[None, bool, float, int, str, list["RecVal"], dict[str, "RecVal"]]

# a JSON object, as produced and consumed by the (de)serializers
RecDict = dict[str, Any]
