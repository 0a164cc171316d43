import unittest

from apps.common.logger import AppLogger, get_logger


class AppLoggerTests(unittest.TestCase):
    def test_bind_merges_context_without_mutating_parent(self):
        base = get_logger("apps.tests.logger").bind(component="tests")
        child = base.bind(layer="unit")
        with self.assertLogs("apps.tests.logger", level="INFO") as captured:
            base.info("parent")
            child.info("child")
        self.assertEqual(
            [r.getMessage() for r in captured.records],
            ["parent | component=tests", "child | component=tests layer=unit"],
        )

    def test_records_render_context_pairs(self):
        log = get_logger("apps.tests.logger").bind(component="tests")
        with self.assertLogs("apps.tests.logger", level="INFO") as captured:
            log.info("Cart loaded", owner_id=7, lines=[1, 2])
        self.assertEqual(
            captured.records[0].getMessage(),
            "Cart loaded | component=tests owner_id=7 lines=[1, 2]",
        )

    def test_error_describes_exception(self):
        log = get_logger("apps.tests.logger")
        with self.assertLogs("apps.tests.logger", level="ERROR") as captured:
            log.error("Remote call failed", ValueError("boom"), product_id=3)
        self.assertIn("product_id=3 error=ValueError: boom", captured.output[0])

    def test_success_is_info_with_outcome(self):
        log = get_logger("apps.tests.logger")
        with self.assertLogs("apps.tests.logger", level="INFO") as captured:
            log.success("Cart cleared")
        self.assertEqual(captured.records[0].levelname, "INFO")
        self.assertIn("outcome=success", captured.output[0])

    def test_format_without_context_returns_message(self):
        self.assertEqual(AppLogger._format("plain", {}), "plain")
