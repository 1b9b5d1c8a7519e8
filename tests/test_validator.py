# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import dataclasses
import unittest
from pathlib import Path

from xapi.model.attachment import Attachment
from xapi.model.verb import Verb
from xapi.serializer.json_deserializer import JsonStatementDeserializer
from xapi.validator import is_bcp_47_language_tag, is_mbox, is_sha1_hash, is_sha256_hash
from xapi.validator.strict import StrictValidator

RESOURCES = Path(__file__).parent / "resources"


class TestPredicates(unittest.TestCase):

    def test_is_mbox(self):
        self.assertTrue(is_mbox("mailto:another@example.com"))
        self.assertFalse(is_mbox("another@example.com"))
        self.assertFalse(is_mbox("mailto:not-an-email"))
        self.assertFalse(is_mbox(None))

    def test_is_sha1_hash(self):
        self.assertTrue(is_sha1_hash("ebd31e95054c018b10727ccffd2ef2ec3a016ee9"))
        self.assertFalse(is_sha1_hash("EBD31E95054C018B10727CCFFD2EF2EC3A016EE9"))
        self.assertFalse(is_sha1_hash("ebd31e95"))

    def test_is_sha256_hash(self):
        self.assertTrue(is_sha256_hash("672fa5fa658017f1b72d65036f13379c6ab05d4ab3b6664908d8acf0b6a0c634"))
        self.assertFalse(is_sha256_hash("ebd31e95054c018b10727ccffd2ef2ec3a016ee9"))

    def test_is_bcp_47_language_tag(self):
        self.assertTrue(is_bcp_47_language_tag("en-US"))
        self.assertTrue(is_bcp_47_language_tag("und"))
        self.assertFalse(is_bcp_47_language_tag("not a language"))


class TestStrictValidator(unittest.TestCase):

    def setUp(self):
        self.statement = JsonStatementDeserializer().deserialize((RESOURCES / "statement_activity.json").read_bytes())
        self.validator = StrictValidator()

    def test_valid(self):
        self.assertEqual(self.validator.validate(self.statement), (True, []))

    def test_missing_id_and_timestamp(self):
        statement = dataclasses.replace(self.statement, id=None, timestamp=None)
        ok, reasons = self.validator.validate(statement)
        self.assertFalse(ok)
        self.assertEqual(reasons, ["missing id", "missing timestamp"])

    def test_missing_verb_display(self):
        statement = dataclasses.replace(self.statement, verb=Verb(id="http://adlnet.gov/expapi/verbs/answered"))
        ok, reasons = self.validator.validate(statement)
        self.assertFalse(ok)
        self.assertEqual(reasons, ["missing verb.display"])

    def test_invalid_language_tag(self):
        statement = dataclasses.replace(self.statement,
                                        verb=Verb(id="http://adlnet.gov/expapi/verbs/answered",
                                                  display={"not a language": "answered"}))
        ok, reasons = self.validator.validate(statement)
        self.assertFalse(ok)
        self.assertEqual(reasons, ["verb.display has an invalid language tag 'not a language'"])

    def test_sha1_attachment_hash(self):
        attachment = Attachment(usage_type="http://adlnet.gov/expapi/attachments/signature",
                                display={"en-US": "Signature"},
                                content_type="application/octet-stream",
                                length=4235,
                                sha2="ebd31e95054c018b10727ccffd2ef2ec3a016ee9")
        statement = dataclasses.replace(self.statement, attachments=(attachment,))
        ok, reasons = self.validator.validate(statement)
        self.assertFalse(ok)
        self.assertEqual(len(reasons), 1)
        self.assertTrue(reasons[0].startswith("attachments[0].sha2 must be a SHA-256 hash"))


if __name__ == '__main__':
    unittest.main()
