import os
import unittest
from datetime import date, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from ncr_tracker.core.errors import STORAGE_FAILURE_MESSAGE
from ncr_tracker.models.product import Product
from tests.base import BASE_TIME, ApiTestCase

PAGE_KEYS = {"data", "total", "page", "limit", "total_pages", "has_next", "has_prev"}


class ListingEndpointTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.add_user(role="site01")
        self.headers = self.auth_headers(self.user)

    def test_page_endpoints_require_a_token(self):
        for path in ("/api/lines/page", "/api/products/page", "/api/clients/page", "/api/reports/page"):
            with self.subTest(path=path):
                response = self.client.get(path)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["detail"], "Missing authorization token")

    def test_garbage_token_is_rejected(self):
        response = self.client.get("/api/products/page", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid token")

    def test_empty_listing_shape(self):
        response = self.client.get("/api/products/page", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), PAGE_KEYS)
        self.assertEqual(body["data"], [])
        self.assertEqual(body["total"], 0)
        self.assertEqual(body["limit"], 10)
        self.assertEqual(body["total_pages"], 0)
        self.assertFalse(body["has_next"])
        self.assertFalse(body["has_prev"])

    def test_products_page_with_search(self):
        for i in range(12):
            self.add_product(f"Bouteille {i:02d}", code=f"B{i:02d}")
        self.add_product("Tetra Pak 1L", code="TP1")

        response = self.client.get("/api/products/page", params={"page": 2, "limit": 5}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([p["designation"] for p in body["data"]], [f"Bouteille {i:02d}" for i in range(5, 10)])
        self.assertEqual(body["total"], 13)
        self.assertEqual(body["total_pages"], 3)
        self.assertTrue(body["has_next"])
        self.assertTrue(body["has_prev"])

        response = self.client.get("/api/products/page", params={"search": "tetra"}, headers=self.headers)
        self.assertEqual([p["code"] for p in response.json()["data"]], ["TP1"])

    def test_out_of_range_window_is_400(self):
        for params in ({"page": 0}, {"limit": 0}, {"limit": 201}):
            with self.subTest(params=params):
                response = self.client.get("/api/clients/page", params=params, headers=self.headers)
                self.assertEqual(response.status_code, 400)
                self.assertIn("must be", response.json()["detail"])

    def test_malformed_id_filter_is_400_with_message(self):
        response = self.client.get("/api/reports/page", params={"product_id": "not-a-uuid"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("product_id", response.json()["detail"])

    def test_malformed_date_filter_is_400(self):
        response = self.client.get("/api/reports/page", params={"start_date": "2024/01/01"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)

    def test_report_filters_over_http(self):
        line = self.add_line("Ligne A")
        product = self.add_product("Canette 330", code="C33")
        for offset in range(3):
            self.add_report(
                line=line,
                product=product,
                reporter=self.user,
                number=f"NC-2024030{offset + 1}-0001",
                report_date=date(2024, 3, 1) + timedelta(days=offset),
                created_at=BASE_TIME + timedelta(days=offset),
            )

        response = self.client.get(
            "/api/reports/page",
            params={"start_date": "2024-03-02", "end_date": "2024-03-03", "line_id": str(line.id)},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([r["report_number"] for r in body["data"]], ["NC-20240303-0001", "NC-20240302-0001"])
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["data"][0]["line_name"], "Ligne A")

        response = self.client.get(
            "/api/reports/page",
            params={"start_date": "2024-03-03", "end_date": "2024-03-01"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["total"], 0)

    def test_storage_failure_is_opaque_500(self):
        Product.__table__.drop(self.engine)
        with self.assertLogs("ncr_tracker.errors", level="ERROR") as logs:
            response = self.client.get("/api/products/page", headers=self.headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": STORAGE_FAILURE_MESSAGE})
        self.assertIn("products", "\n".join(logs.output))

    def test_users_page_is_admin_only(self):
        response = self.client.get("/api/users/page", headers=self.headers)
        self.assertEqual(response.status_code, 403)

        response = self.client.get("/api/users/page", params={"search": "site01"}, headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u["username"] for u in response.json()["data"]], ["operator"])


if __name__ == "__main__":
    unittest.main()
