# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from itertools import islice

from xapi.cli.command import XapiCommand
from xapi.client import XapiClient
from xapi.errors import XapiError
from xapi.log import get_child_logger
from xapi.request import GetStatementsRequest
from xapi.serializer.json_serializer import JsonStatementSerializer

log = get_child_logger("statements")


class StatementsCommand(XapiCommand):
    """Lists statements of the configured LRS, one JSON document per line.

    statements
        {--verb= : Only statements with this verb (IRI)}
        {--activity= : Only statements about this activity (IRI)}
        {--since= : Only statements stored after this ISO 8601 timestamp}
        {--until= : Only statements stored at or before this ISO 8601 timestamp}
        {--limit= : Max number of statements per page (overrides --page-limit)}
        {--max= : Stop after this many statements}
    """

    def __init__(self):
        super().__init__()
        # add options from config schema
        self._add_options_from_schema()

    def handle(self):
        config = self._load_config()

        request = GetStatementsRequest(
            verb=self.option("verb"),
            activity=self.option("activity"),
            since=self.option_datetime("since"),
            until=self.option_datetime("until"),
            limit=self.option_int("limit", default=config.page_limit, min=0),
        )
        max_statements = self.option_int("max", min=0)

        client = XapiClient.from_config(config)
        serializer = JsonStatementSerializer()
        count = 0
        try:
            statements = client.get_statement_iterator(request).stream()
            if max_statements is not None:
                # islice stops pulling once enough statements are out, so no further pages are fetched
                statements = islice(statements, max_statements)
            for statement in statements:
                # raw, so JSON content is never taken for formatting tags
                self.io.write_line_raw(serializer.serialize(statement))
                count += 1
        except XapiError as err:
            log.error("Failed listing statements from '%s': %s", client.endpoint, err)
            return 1

        log.info("Listed %d statement(s)", count)
        return 0
