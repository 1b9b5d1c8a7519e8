# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import unittest
from pathlib import Path
from uuid import UUID

import orjson

from xapi.client import XapiClient
from xapi.errors import DecodeError, MissingBodyError
from xapi.model import verb as verbs
from xapi.model.activity import Activity
from xapi.model.actor import Agent
from xapi.model.statement import Statement
from xapi.request import GetStatementsRequest
from xapi.request.document import (DeleteStatesRequest, Document, GetActivityProfileRequest, GetStateRequest,
                                    GetStatesRequest, PostStateRequest, PutAgentProfileRequest)
from xapi.request.transport import PageResponse, Transport

RESOURCES = Path(__file__).parent / "resources"

ENDPOINT = "https://lrs.example.com/xapi/"
STATEMENT_ID = UUID("fd41c918-b88b-4b20-a0a5-a4c32391aaa0")
VOIDING_ID = UUID("2d6bb8a3-5e0b-4f6f-8a6f-9a2f3b1a0c11")
REGISTRATION = UUID("67828e3a-d116-4e18-8af3-2d2c59e27be6")
AGENT = Agent(name="A N Other", mbox="mailto:another@example.com")
AGENT_PARAM = "%7B%22name%22%3A%22A%20N%20Other%22%2C%22mbox%22%3A%22mailto%3Aanother%40example.com%22%7D"
NO_CONTENT = PageResponse(content_type=None, body=None, status_code=204)


def _json(body: bytes) -> PageResponse:
    return PageResponse(content_type="application/json", body=body)


class RecordingTransport(Transport):
    """Answers every request with the next canned response and records the requests."""

    def __init__(self, *responses: PageResponse) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, str, str | bytes | None]] = []
        self.content_types: list[str | None] = []

    def fetch_page(self, address: str) -> PageResponse:
        return self.send("GET", address)

    def send(self,
             method: str,
             address: str,
             body: str | bytes | None = None,
             content_type: str | None = None) -> PageResponse:
        self.requests.append((method, address, body))
        self.content_types.append(content_type)
        return self.responses.pop(0)


class TestXapiClient(unittest.TestCase):

    def test_get_statement(self):
        transport = RecordingTransport(_json((RESOURCES / "statement_activity.json").read_bytes()))
        client = XapiClient(ENDPOINT, transport)

        statement = client.get_statement(STATEMENT_ID)

        self.assertEqual(statement.id, STATEMENT_ID)
        self.assertEqual(transport.requests,
                         [("GET", ENDPOINT + "statements?statementId=fd41c918-b88b-4b20-a0a5-a4c32391aaa0", None)])

    def test_get_voided_statement(self):
        transport = RecordingTransport(_json((RESOURCES / "statement_activity.json").read_bytes()))
        XapiClient(ENDPOINT, transport).get_voided_statement(STATEMENT_ID)
        self.assertEqual(transport.requests[0][1],
                         ENDPOINT + "statements?voidedStatementId=fd41c918-b88b-4b20-a0a5-a4c32391aaa0")

    def test_get_statement_without_body(self):
        client = XapiClient(ENDPOINT, RecordingTransport(PageResponse(content_type=None, body=None)))
        with self.assertRaises(MissingBodyError):
            client.get_statement(STATEMENT_ID)

    def test_get_statements_and_more(self):
        transport = RecordingTransport(
            _json((RESOURCES / "statements_page_1.json").read_bytes()),
            _json((RESOURCES / "statements_page_2.json").read_bytes()),
        )
        client = XapiClient(ENDPOINT, transport)

        first = client.get_statements(GetStatementsRequest(limit=2))
        second = client.get_more_statements(first.more)

        self.assertEqual(len(first.statements), 2)
        self.assertEqual(len(second.statements), 1)
        self.assertFalse(second.has_more())
        self.assertEqual([address for _, address, _ in transport.requests],
                         [ENDPOINT + "statements?limit=2", "https://lrs.example.com/statements/more/1"])

    def test_get_statement_iterator(self):
        transport = RecordingTransport(
            _json((RESOURCES / "statements_page_1.json").read_bytes()),
            _json((RESOURCES / "statements_page_2.json").read_bytes()),
        )
        iterator = XapiClient(ENDPOINT, transport).get_statement_iterator()

        self.assertEqual(len(list(iterator)), 3)
        self.assertEqual(transport.requests[1][1], "https://lrs.example.com/statements/more/1")

    def test_post_statements(self):
        transport = RecordingTransport(_json(f'["{STATEMENT_ID}"]'.encode("utf-8")))
        statement = Statement(actor=Agent(name="A N Other", mbox="mailto:another@example.com"),
                              verb=verbs.ATTEMPTED,
                              object=Activity(id="https://example.com/activity/1"))

        ids = XapiClient(ENDPOINT, transport).post_statements([statement])

        self.assertEqual(ids, [STATEMENT_ID])
        method, address, body = transport.requests[0]
        self.assertEqual((method, address), ("POST", ENDPOINT + "statements"))
        self.assertEqual(orjson.loads(body), [{
            "actor": {
                "name": "A N Other",
                "mbox": "mailto:another@example.com"
            },
            "verb": {
                "id": "http://adlnet.gov/expapi/verbs/attempted",
                "display": {
                    "und": "attempted"
                }
            },
            "object": {
                "id": "https://example.com/activity/1"
            },
        }])

    def test_post_nothing_fails(self):
        with self.assertRaises(ValueError):
            XapiClient(ENDPOINT, RecordingTransport()).post_statements([])

    def test_put_statement(self):
        transport = RecordingTransport(PageResponse(content_type=None, body=None, status_code=204))
        statement = Statement(id=STATEMENT_ID,
                              actor=Agent(mbox="mailto:another@example.com"),
                              verb=verbs.ATTEMPTED,
                              object=Activity(id="https://example.com/activity/1"))

        XapiClient(ENDPOINT, transport).put_statement(statement)

        method, address, _ = transport.requests[0]
        self.assertEqual(method, "PUT")
        self.assertEqual(address, ENDPOINT + "statements?statementId=fd41c918-b88b-4b20-a0a5-a4c32391aaa0")

    def test_void_statement(self):
        transport = RecordingTransport(_json(f'["{VOIDING_ID}"]'.encode("utf-8")))
        statement = Statement(id=STATEMENT_ID,
                              actor=Agent(mbox="mailto:another@example.com"),
                              verb=verbs.PASSED,
                              object=Activity(id="https://example.com/activity/1"))

        voiding_id = XapiClient(ENDPOINT, transport).void_statement(statement)

        self.assertEqual(voiding_id, VOIDING_ID)
        body = orjson.loads(transport.requests[0][2])
        self.assertEqual(body[0]["verb"]["id"], "http://adlnet.gov/expapi/verbs/voided")
        self.assertEqual(body[0]["object"], {"objectType": "StatementRef", "id": str(STATEMENT_ID)})


class TestDocuments(unittest.TestCase):

    def test_get_state_as_text(self):
        transport = RecordingTransport(PageResponse(content_type="text/plain", body=b"Hello World!"))

        document = XapiClient(ENDPOINT, transport).get_state(
            GetStateRequest(activity_id="https://example.com/activity/1",
                            agent=AGENT,
                            state_id="bookmark",
                            registration=REGISTRATION))

        self.assertEqual(document.text(), "Hello World!")
        self.assertFalse(document.is_json())
        self.assertEqual(transport.requests, [(
            "GET",
            ENDPOINT + "activities/state?activityId=https%3A%2F%2Fexample.com%2Factivity%2F1&agent=" + AGENT_PARAM +
            "&registration=67828e3a-d116-4e18-8af3-2d2c59e27be6&stateId=bookmark",
            None,
        )])

    def test_post_state_with_text(self):
        transport = RecordingTransport(NO_CONTENT)

        XapiClient(ENDPOINT, transport).post_state(
            PostStateRequest(activity_id="https://example.com/activity/1",
                             agent=AGENT,
                             state_id="bookmark",
                             document=Document.of("Hello World!", "text/plain")))

        method, address, body = transport.requests[0]
        self.assertEqual(method, "POST")
        self.assertEqual(
            address, ENDPOINT + "activities/state?activityId=https%3A%2F%2Fexample.com%2Factivity%2F1&agent=" +
            AGENT_PARAM + "&stateId=bookmark")
        self.assertEqual(body, b"Hello World!")
        self.assertEqual(transport.content_types, ["text/plain"])

    def test_get_states(self):
        transport = RecordingTransport(_json(b'["State1", "State2", "State3"]'))

        ids = XapiClient(ENDPOINT, transport).get_states(
            GetStatesRequest(activity_id="https://example.com/activity/1", agent=AGENT))

        self.assertEqual(ids, ["State1", "State2", "State3"])
        self.assertEqual(transport.requests[0][1],
                         ENDPOINT + "activities/state?activityId=https%3A%2F%2Fexample.com%2Factivity%2F1&agent=" +
                         AGENT_PARAM)

    def test_delete_states(self):
        transport = RecordingTransport(NO_CONTENT)
        XapiClient(ENDPOINT, transport).delete_states(
            DeleteStatesRequest(activity_id="https://example.com/activity/1", agent=AGENT, registration=REGISTRATION))
        method, address, body = transport.requests[0]
        self.assertEqual(method, "DELETE")
        self.assertTrue(address.endswith("&registration=67828e3a-d116-4e18-8af3-2d2c59e27be6"))
        self.assertIsNone(body)

    def test_put_agent_profile_as_json(self):
        transport = RecordingTransport(NO_CONTENT)

        XapiClient(ENDPOINT, transport).put_agent_profile(
            PutAgentProfileRequest(agent=AGENT,
                                   profile_id="greeting",
                                   document=Document.of({
                                       "firstName": "A N",
                                       "lastName": "Other"
                                   })))

        method, address, body = transport.requests[0]
        self.assertEqual(method, "PUT")
        self.assertEqual(address, ENDPOINT + "agents/profile?agent=" + AGENT_PARAM + "&profileId=greeting")
        self.assertEqual(body, b'{"firstName":"A N","lastName":"Other"}')
        self.assertEqual(transport.content_types, ["application/json"])

    def test_get_agent_profiles(self):
        transport = RecordingTransport(_json(b'["greeting"]'))
        ids = XapiClient(ENDPOINT, transport).get_agent_profiles(AGENT)
        self.assertEqual(ids, ["greeting"])
        self.assertEqual(transport.requests[0][1], ENDPOINT + "agents/profile?agent=" + AGENT_PARAM)

    def test_get_activity_profile_as_json(self):
        transport = RecordingTransport(_json(b'{"progress": 0.5}'))

        document = XapiClient(ENDPOINT, transport).get_activity_profile(
            GetActivityProfileRequest(activity_id="https://example.com/activity/1", profile_id="bookmark"))

        self.assertTrue(document.is_json())
        self.assertEqual(document.json(), {"progress": 0.5})
        self.assertEqual(transport.requests[0][1],
                         ENDPOINT + "activities/profile?activityId=https%3A%2F%2Fexample.com%2Factivity%2F1"
                         "&profileId=bookmark")

    def test_document_ids_must_be_strings(self):
        transport = RecordingTransport(_json(b"[1, 2]"))
        with self.assertRaises(DecodeError):
            XapiClient(ENDPOINT, transport).get_activity_profiles("https://example.com/activity/1")


class TestLookups(unittest.TestCase):

    def test_get_agents(self):
        transport = RecordingTransport(
            _json(b'{"objectType": "Person", "name": ["A N Other"], "mbox": ["mailto:another@example.com"]}'))

        person = XapiClient(ENDPOINT, transport).get_agents(Agent(mbox="mailto:another@example.com"))

        self.assertEqual(person.name, ("A N Other",))
        self.assertEqual(person.mbox, ("mailto:another@example.com",))
        self.assertEqual(transport.requests[0][1],
                         ENDPOINT + "agents?agent=%7B%22mbox%22%3A%22mailto%3Aanother%40example.com%22%7D")

    def test_get_activity(self):
        transport = RecordingTransport(
            _json(b'{"id": "https://example.com/activity/simplestatement",'
                  b' "definition": {"name": {"en": "Simple Statement"}}}'))

        activity = XapiClient(ENDPOINT, transport).get_activity("https://example.com/activity/simplestatement")

        self.assertEqual(activity.id, "https://example.com/activity/simplestatement")
        self.assertEqual(activity.definition.name, {"en": "Simple Statement"})
        self.assertEqual(transport.requests[0][1],
                         ENDPOINT + "activities?activityId=https%3A%2F%2Fexample.com%2Factivity%2Fsimplestatement")

    def test_get_about(self):
        transport = RecordingTransport(
            _json(b'{"extensions": {"https://example.com/extensions/test": {"name": "Example extension"}},'
                  b' "version": ["0.9", "0.95", "1.0.3"]}'))

        about = XapiClient(ENDPOINT, transport).get_about()

        self.assertEqual(about.version, ("0.9", "0.95", "1.0.3"))
        self.assertTrue(about.supports("1.0.3"))
        self.assertEqual(transport.requests[0][1], ENDPOINT + "about")

    def test_about_without_version(self):
        transport = RecordingTransport(_json(b'{"extensions": {}}'))
        with self.assertRaises(DecodeError):
            XapiClient(ENDPOINT, transport).get_about()


if __name__ == '__main__':
    unittest.main()
