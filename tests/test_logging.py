import json
import logging
import unittest

from usermgmt.core.logging import (
    RequestJSONFormatter,
    current_request_id,
    request_context,
)


def _record(message="hello", level=logging.INFO):
    return logging.LogRecord("usermgmt.test", level, __file__, 1, message, None, None)


class TestRequestJSONFormatter(unittest.TestCase):
    def setUp(self):
        self.formatter = RequestJSONFormatter("User API")

    def format(self, record):
        return json.loads(self.formatter.format(record))

    def test_fields(self):
        line = self.format(_record(level=logging.WARNING))
        self.assertEqual(line["message"], "hello")
        self.assertEqual(line["level"], "WARNING")
        self.assertEqual(line["name"], "usermgmt.test")
        self.assertEqual(line["service"], "User API")
        self.assertIn("timestamp", line)
        self.assertNotIn("request_id", line)
        self.assertNotIn("trace_id", line)

    def test_request_id_is_added_inside_request_context(self):
        with request_context("req-1"):
            line = self.format(_record())
        self.assertEqual(line["request_id"], "req-1")
        self.assertIsNone(current_request_id())

    def test_nested_contexts_restore_outer_id(self):
        with request_context("outer"):
            with request_context("inner"):
                self.assertEqual(current_request_id(), "inner")
            self.assertEqual(current_request_id(), "outer")


if __name__ == "__main__":
    unittest.main()
