import unittest
from unittest.mock import Mock, patch
from rest_framework.test import APIRequestFactory
from rest_framework.response import Response
from apps.catalog.views import ProductListView, ProductDetailView, CategoryListView
from apps.catalog.pagination import ProductListPagination
from apps.catalog.serializers import ProductReadSerializer
from apps.catalog.dtos import ProductDTO, CategoryDTO


def make_product_dto(product_id=1, title="Borehole Pump"):
    return ProductDTO(
        id=product_id,
        title=title,
        slug=f"product-{product_id}",
        price="1499.00",
        description="Submersible",
        image="https://cdn.example.com/pump.png",
        stock=4,
        status="active",
        category=CategoryDTO(id=1, name="Borehole", slug="borehole"),
    )


class CatalogViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_product_list_paginates_and_filters(self):
        service_mock = Mock()
        expected_response = Response({"results": []})
        service_mock.list_products_paginated.return_value = expected_response
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.get(
                "/api/products/", {"limit": 1, "category": "borehole"}
            )
            response = ProductListView.as_view()(request)
        self.assertIs(response, expected_response)
        _, kwargs = service_mock.list_products_paginated.call_args
        self.assertEqual(kwargs["category"], "borehole")
        self.assertIs(kwargs["paginator_class"], ProductListPagination)
        self.assertIs(kwargs["serializer_class"], ProductReadSerializer)

    def test_product_detail_returns_serialized_dto(self):
        service_mock = Mock()
        service_mock.get_product.return_value = make_product_dto(7)
        with patch.object(ProductDetailView, "service", service_mock):
            request = self.factory.get("/api/products/7/")
            response = ProductDetailView.as_view()(request, product_id=7)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], 7)
        self.assertEqual(response.data["price"], "1499.00")
        self.assertEqual(response.data["category"]["slug"], "borehole")

    def test_product_detail_missing_returns_not_found_envelope(self):
        service_mock = Mock()
        service_mock.get_product.return_value = None
        with patch.object(ProductDetailView, "service", service_mock):
            request = self.factory.get("/api/products/99/")
            response = ProductDetailView.as_view()(request, product_id=99)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(response.data["error"]["details"], {"id": "99"})

    def test_category_list(self):
        service_mock = Mock()
        service_mock.list_categories.return_value = [
            CategoryDTO(id=1, name="Borehole", slug="borehole"),
            CategoryDTO(id=2, name="Pool", slug="pool"),
        ]
        with patch.object(CategoryListView, "service", service_mock):
            request = self.factory.get("/api/categories/")
            response = CategoryListView.as_view()(request)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([c["slug"] for c in response.data], ["borehole", "pool"])
