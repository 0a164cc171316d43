from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import ApplicationError, global_exception_handler
from apps.carts.services import CartItemNotFoundError

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_application_error_returns_structured_response():
    request = factory.post("/api/cart/items/")
    exc = ApplicationError(
        "CONFLICT",
        "Cart line changed concurrently",
        status_code=status.HTTP_409_CONFLICT,
        details={"productId": "42"},
    )
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_409_CONFLICT
    assert payload["code"] == "CONFLICT"
    assert payload["message"] == "Cart line changed concurrently"
    assert payload["details"] == {"productId": "42"}


def test_domain_error_uses_class_defaults():
    request = factory.post("/api/cart/items/42/increase/")
    exc = CartItemNotFoundError(details={"productId": "42"})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert payload["code"] == "NOT_FOUND"
    assert payload["message"] == "Cart item not found"


def test_validation_error_preserves_details():
    request = factory.post("/api/cart/items/", data={})
    exc = ValidationError({"productId": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"productId": ["This field is required."]}


def test_not_authenticated_maps_to_unauthorized():
    request = factory.get("/api/cart/")
    response = global_exception_handler(NotAuthenticated(), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert payload["code"] == "UNAUTHORIZED"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/cart/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload
