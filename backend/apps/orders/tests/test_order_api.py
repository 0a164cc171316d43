from decimal import Decimal
from unittest.mock import patch

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework.throttling import ScopedRateThrottle

from apps.carts.models import CartItem
from apps.catalog.models import Category, Product
from apps.orders.models import Order, Payment
from apps.users.models import User

ADDRESS = {
    "fullName": "Amina Khan",
    "phone": "+92 300 1234567",
    "addressLine1": "12 Canal Road",
    "city": "Lahore",
    "country": "Pakistan",
}


class OrderApiTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(
            username="buyer",
            password="TestPass123",
            firstname="Amina",
            lastname="Khan",
            email="buyer@example.com",
        )
        User.objects.create_user(
            username="otherbuyer",
            password="TestPass123",
            firstname="Other",
            lastname="Buyer",
            email="otherbuyer@example.com",
        )
        category = Category.objects.create(name="Pressure Pumps", slug="pressure-pumps")
        self.pump = Product.objects.create(
            title="Espa Tecnoplus",
            slug="espa-tecnoplus",
            category=category,
            price=Decimal("1500.00"),
            stock=3,
        )
        self.checkout_url = reverse("api-checkout")
        self.orders_url = reverse("api-orders")

    def _auth(self, username="buyer"):
        login = self.client.post(
            reverse("auth-token"),
            {"username": username, "password": "TestPass123"},
            format="json",
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

    def _add_to_cart(self, quantity=1):
        for _ in range(quantity):
            res = self.client.post(
                reverse("api-cart-items"), {"productId": self.pump.id}, format="json"
            )
            self.assertIn(res.status_code, (status.HTTP_200_OK, status.HTTP_201_CREATED))

    def test_checkout_requires_authentication(self):
        res = self.client.post(self.checkout_url, {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["error"]["code"], "UNAUTHORIZED")

    def test_checkout_creates_pending_order_and_empties_cart(self):
        self._auth()
        self._add_to_cart(quantity=2)

        res = self.client.post(
            self.checkout_url,
            {"addresses": {"shipping": ADDRESS}, "paymentMethod": "cod"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        body = res.data
        self.assertTrue(body["orderNumber"].startswith("ORD-"))
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["totalAmount"], "3000.00")
        self.assertEqual(body["payment"], {"method": "cod", "status": "pending", "amount": "3000.00"})
        self.assertEqual(body["items"][0]["productName"], "Espa Tecnoplus")
        self.assertEqual(body["items"][0]["quantity"], 2)
        self.assertEqual(body["shippingAddress"]["city"], "Lahore")
        self.assertEqual(body["billingAddress"]["id"], body["shippingAddress"]["id"])

        cart = self.client.get(reverse("api-cart"))
        self.assertEqual(cart.data["totalItems"], 0)
        self.assertEqual(Payment.objects.filter(order_id=body["id"]).count(), 1)

    def test_checkout_with_empty_cart_is_validation_error(self):
        self._auth()
        res = self.client.post(self.checkout_url, {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(res.data["error"]["message"], "Cart is empty")
        self.assertFalse(Order.objects.exists())

    def test_checkout_payload_validation(self):
        self._auth()
        self._add_to_cart()
        cases = {
            "unknown payment method": {"paymentMethod": "crypto"},
            "billing missing": {
                "addresses": {"shipping": ADDRESS, "billingSameAsShipping": False}
            },
            "shipping incomplete": {"addresses": {"shipping": {"fullName": "A"}}},
        }
        for label, payload in cases.items():
            with self.subTest(label):
                res = self.client.post(self.checkout_url, payload, format="json")
                self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(CartItem.objects.filter(owner=self.user).count(), 1)

    def test_orders_list_and_detail_are_scoped_to_user(self):
        self._auth()
        self._add_to_cart()
        created = self.client.post(self.checkout_url, {}, format="json").data

        listing = self.client.get(self.orders_url)
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(len(listing.data), 1)
        self.assertEqual(listing.data[0]["orderNumber"], created["orderNumber"])
        self.assertEqual(listing.data[0]["itemCount"], 1)

        detail_url = reverse("api-order", kwargs={"order_id": created["id"]})
        detail = self.client.get(detail_url)
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data["totalAmount"], "1500.00")
        self.assertIsNone(detail.data["shippingAddress"])

        self._auth("otherbuyer")
        self.assertEqual(self.client.get(self.orders_url).data, [])
        missing = self.client.get(detail_url)
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data["error"]["code"], "NOT_FOUND")

    def test_checkout_is_throttled(self):
        self._auth()
        with patch.object(ScopedRateThrottle, "THROTTLE_RATES", {"checkout": "1/min"}):
            first = self.client.post(self.checkout_url, {}, format="json")
            second = self.client.post(self.checkout_url, {}, format="json")
        self.assertEqual(first.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(second.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(second.data["error"]["code"], "TOO_MANY_REQUESTS")
        self.assertIn("retryAfter", second.data["error"]["details"])
