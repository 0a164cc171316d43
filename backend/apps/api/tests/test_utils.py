import unittest
from rest_framework import status
from apps.api.utils import error_response, status_for_code


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "Cart item not found", {"productId": "1"})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["status"], status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"productId": "1"})

    def test_code_is_normalized_to_upper_case(self):
        resp = error_response(" not_found ", "missing")
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_custom_status_override(self):
        resp = error_response("UNKNOWN", "oops", http_status=status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.data["error"]["message"], "oops")

    def test_unknown_code_defaults_to_bad_request(self):
        self.assertEqual(status_for_code("SOMETHING_ELSE"), status.HTTP_400_BAD_REQUEST)

    def test_error_response_supports_hint_and_extra(self):
        resp = error_response(
            "VALIDATION_ERROR",
            "Invalid value",
            hint="Use digits only",
            extra={"field": "productId"},
        )
        payload = resp.data["error"]
        self.assertEqual(payload["hint"], "Use digits only")
        self.assertEqual(payload["extra"], {"field": "productId"})

    def test_exception_details_are_reduced_to_type(self):
        resp = error_response("SERVER_ERROR", "failed", KeyError("x"))
        self.assertEqual(resp.data["error"]["details"], {"type": "KeyError"})

    def test_empty_message_rejected(self):
        with self.assertRaises(ValueError):
            error_response("NOT_FOUND", "  ")
