import os
import unittest
from datetime import date, timedelta
from unittest.mock import MagicMock

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from sqlalchemy import select

from ncr_tracker.core.config import settings
from ncr_tracker.core.errors import StorageError, ValidationError
from ncr_tracker.models.product import Product
from ncr_tracker.schemas.pagination import PageRequest
from ncr_tracker.services.catalog import PRODUCTS_LISTING, clients_page, lines_page, products_page
from ncr_tracker.services.pagination import paginate
from ncr_tracker.services.reports import reports_page
from ncr_tracker.services.users import users_page
from tests.base import BASE_TIME, DbTestCase

TETRA_DESIGNATIONS = ["Tetra Brik 200", "Tetra Pak 1L", "Tetra Prisma 330"]


class ProductListingTests(DbTestCase):
    def seed_products(self):
        designations = [f"Bouteille {i:02d}" for i in range(1, 23)] + TETRA_DESIGNATIONS
        for i, designation in enumerate(designations):
            self.add_product(designation, code=f"P-{i:03d}")
        return sorted(designations)

    def test_empty_table_returns_empty_page(self):
        page = products_page(self.db, page=1, limit=10)
        self.assertEqual(
            page.model_dump(),
            {"data": [], "total": 0, "page": 1, "limit": 10, "total_pages": 0, "has_next": False, "has_prev": False},
        )

    def test_middle_page_window(self):
        ordered = self.seed_products()
        page = products_page(self.db, page=2, limit=10)

        self.assertEqual([p.designation for p in page.data], ordered[10:20])
        self.assertEqual(page.total, 25)
        self.assertEqual(page.total_pages, 3)
        self.assertTrue(page.has_next)
        self.assertTrue(page.has_prev)

    def test_last_page_is_partial(self):
        ordered = self.seed_products()
        page = products_page(self.db, page=3, limit=10)
        self.assertEqual([p.designation for p in page.data], ordered[20:])
        self.assertFalse(page.has_next)

    def test_page_beyond_end_is_empty_with_real_total(self):
        self.seed_products()
        page = products_page(self.db, page=9, limit=10)
        self.assertEqual(page.data, [])
        self.assertEqual(page.total, 25)
        self.assertFalse(page.has_next)
        self.assertTrue(page.has_prev)

    def test_text_search_is_case_insensitive_and_counts_filtered_rows(self):
        self.seed_products()
        page = products_page(self.db, page=1, limit=10, search="tetra")
        self.assertEqual([p.designation for p in page.data], TETRA_DESIGNATIONS)
        self.assertEqual(page.total, 3)
        self.assertEqual(page.total_pages, 1)
        self.assertFalse(page.has_next)

    def test_text_search_matches_any_listed_column(self):
        self.seed_products()
        page = products_page(self.db, page=1, limit=10, search="P-02")
        self.assertEqual(sorted(p.code for p in page.data), [f"P-{i:03d}" for i in range(20, 25)])

    def test_like_wildcards_match_literally(self):
        self.add_product("Promo 50% off", code="PROMO")
        self.add_product("Promo 500 ml", code="P500")
        page = products_page(self.db, page=1, limit=10, search="50%")
        self.assertEqual([p.designation for p in page.data], ["Promo 50% off"])

    def test_pages_partition_the_filtered_set(self):
        ordered = self.seed_products()
        seen = []
        for number in range(1, 5):
            seen.extend(p.designation for p in products_page(self.db, page=number, limit=7).data)
        self.assertEqual(seen, ordered)

    def test_ties_on_sort_key_are_broken_by_id(self):
        for i in range(6):
            self.add_product("Same name", code=f"S-{i}")
        first = products_page(self.db, page=1, limit=3).data
        second = products_page(self.db, page=2, limit=3).data
        ids = [p.id for p in first + second]
        self.assertEqual(len(set(ids)), 6)
        self.assertEqual(ids, sorted(ids))

    def test_repeated_queries_are_identical(self):
        self.seed_products()
        one = products_page(self.db, page=2, limit=5, search="bouteille")
        two = products_page(self.db, page=2, limit=5, search="bouteille")
        self.assertEqual(one.model_dump(), two.model_dump())

    def test_missing_table_surfaces_storage_error(self):
        Product.__table__.drop(self.engine)
        with self.assertRaises(StorageError):
            products_page(self.db, page=1, limit=10)


class WindowValidationTests(DbTestCase):
    def test_invalid_page_and_limit_are_rejected(self):
        for page, limit in [(0, 10), (-1, 10), (1, 0), (1, -5), (1, settings.PAGINATION_MAX_LIMIT + 1)]:
            with self.subTest(page=page, limit=limit):
                with self.assertRaises(ValidationError):
                    products_page(self.db, page=page, limit=limit)

    def test_max_limit_is_accepted(self):
        self.add_product("Only one")
        page = products_page(self.db, page=1, limit=settings.PAGINATION_MAX_LIMIT)
        self.assertEqual(page.total, 1)

    def test_unknown_filter_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            paginate(self.db, PRODUCTS_LISTING, PageRequest(page=1, limit=10, filters={"colour": "red"}))
        self.assertIn("colour", ctx.exception.message)

    def test_validation_failures_never_touch_the_session(self):
        db = MagicMock()
        with self.assertRaises(ValidationError):
            reports_page(db, page=1, limit=10, product_id="not-a-uuid")
        with self.assertRaises(ValidationError):
            products_page(db, page=0, limit=10)
        db.execute.assert_not_called()


class OtherListingTests(DbTestCase):
    def test_lines_sorted_by_name_and_searchable_by_description(self):
        self.add_line("Ligne B", description="PET 1.5L")
        self.add_line("Ligne A", description="Canettes")
        self.add_line("Ligne C", description="pet 0.5L")

        everything = lines_page(self.db, page=1, limit=10)
        self.assertEqual([l.name for l in everything.data], ["Ligne A", "Ligne B", "Ligne C"])

        pet = lines_page(self.db, page=1, limit=10, search="PET")
        self.assertEqual([l.name for l in pet.data], ["Ligne B", "Ligne C"])
        self.assertEqual(pet.total, 2)

    def test_clients_sorted_by_name(self):
        for name in ["Zeta", "Alpha", "Mu"]:
            self.add_client(name)
        page = clients_page(self.db, page=1, limit=2)
        self.assertEqual([c.name for c in page.data], ["Alpha", "Mu"])
        self.assertEqual(page.total_pages, 2)

    def test_users_newest_first(self):
        older = self.add_user("older")
        newer = self.add_user("newer")
        older.created_at = BASE_TIME
        newer.created_at = BASE_TIME + timedelta(hours=1)
        self.db.commit()

        page = users_page(self.db, page=1, limit=10)
        self.assertEqual([u.username for u in page.data], ["newer", "older"])
        self.assertEqual(users_page(self.db, page=1, limit=10, search="NEW").total, 1)


class ReportListingTests(DbTestCase):
    def setUp(self):
        super().setUp()
        self.reporter = self.add_user()
        self.line_a = self.add_line("Ligne A")
        self.line_b = self.add_line("Ligne B")
        self.tetra = self.add_product("Tetra Pak 1L", code="TP1")
        self.can = self.add_product("Canette 330", code="C33")
        self.fmt = self.add_format(1000, "ML")

        self.r1 = self.add_report(
            line=self.line_a,
            product=self.tetra,
            reporter=self.reporter,
            number="NC-20240110-0001",
            report_date=date(2024, 1, 10),
            created_at=BASE_TIME,
            claim_origin="client",
            status="open",
            format_id=self.fmt.id,
        )
        self.r2 = self.add_report(
            line=self.line_b,
            product=self.can,
            reporter=self.reporter,
            number="NC-20240201-0001",
            report_date=date(2024, 2, 1),
            created_at=BASE_TIME + timedelta(days=1),
            details="Etiquette decollee",
            claim_origin="site01",
            status="resolved",
        )
        self.r3 = self.add_report(
            line=self.line_a,
            product=self.can,
            reporter=self.reporter,
            number="NC-20240301-0001",
            report_date=date(2024, 3, 1),
            created_at=BASE_TIME + timedelta(days=2),
            claim_origin="consommateur",
            status="open",
        )

    def numbers(self, page):
        return [r.report_number for r in page.data]

    def test_newest_first_with_display_columns(self):
        page = reports_page(self.db, page=1, limit=10)
        self.assertEqual(self.numbers(page), ["NC-20240301-0001", "NC-20240201-0001", "NC-20240110-0001"])
        oldest = page.data[-1]
        self.assertEqual(oldest.line_name, "Ligne A")
        self.assertEqual(oldest.product_name, "Tetra Pak 1L")
        self.assertEqual(oldest.format_display, "1000 ML")
        self.assertIsNone(page.data[0].format_display)
        self.assertEqual(oldest.valuation, 150.0)

    def test_search_reads_product_designation(self):
        page = reports_page(self.db, page=1, limit=10, search="tetra")
        self.assertEqual(self.numbers(page), ["NC-20240110-0001"])
        self.assertEqual(page.total, 1)

    def test_search_reads_details_and_number(self):
        self.assertEqual(self.numbers(reports_page(self.db, page=1, limit=10, search="etiquette")), ["NC-20240201-0001"])
        self.assertEqual(self.numbers(reports_page(self.db, page=1, limit=10, search="20240301")), ["NC-20240301-0001"])

    def test_id_filters(self):
        page = reports_page(self.db, page=1, limit=10, product_id=str(self.can.id), line_id=str(self.line_a.id))
        self.assertEqual(self.numbers(page), ["NC-20240301-0001"])
        self.assertEqual(page.total, 1)

    def test_inclusive_date_range(self):
        page = reports_page(self.db, page=1, limit=10, start_date="2024-01-10", end_date="2024-02-01")
        self.assertEqual(self.numbers(page), ["NC-20240201-0001", "NC-20240110-0001"])

    def test_end_before_start_is_empty_not_an_error(self):
        page = reports_page(self.db, page=1, limit=10, start_date="2024-03-01", end_date="2024-01-01")
        self.assertEqual(page.data, [])
        self.assertEqual(page.total, 0)
        self.assertEqual(page.total_pages, 0)

    def test_choice_filters(self):
        self.assertEqual(self.numbers(reports_page(self.db, page=1, limit=10, status="resolved")), ["NC-20240201-0001"])
        self.assertEqual(
            self.numbers(reports_page(self.db, page=1, limit=10, claim_origin="CONSOMMATEUR")), ["NC-20240301-0001"]
        )

    def test_combined_filters_hold_for_every_row(self):
        page = reports_page(self.db, page=1, limit=10, line_id=str(self.line_a.id), status="open", start_date="2024-01-01")
        self.assertEqual(page.total, 2)
        for report in page.data:
            self.assertEqual(report.line_id, self.line_a.id)
            self.assertEqual(report.status, "open")
            self.assertGreaterEqual(report.report_date, date(2024, 1, 1))

    def test_blank_filters_are_ignored(self):
        page = reports_page(self.db, page=1, limit=10, search="  ", product_id="", status=None)
        self.assertEqual(page.total, 3)

    def test_invalid_filter_values(self):
        for filters in ({"product_id": "not-a-uuid"}, {"start_date": "01/01/2024"}, {"status": "pending"}):
            with self.subTest(filters=filters):
                with self.assertRaises(ValidationError):
                    reports_page(self.db, page=1, limit=10, **filters)

    def test_count_matches_rows_across_pages(self):
        first = reports_page(self.db, page=1, limit=2, line_id=str(self.line_a.id))
        second = reports_page(self.db, page=2, limit=2, line_id=str(self.line_a.id))
        self.assertEqual(first.total, 2)
        self.assertEqual(len(first.data), 2)
        self.assertEqual(second.data, [])

    def test_rows_exist_in_storage(self):
        stored = set(self.db.execute(select(Product.designation)).scalars())
        for report in reports_page(self.db, page=1, limit=10).data:
            self.assertIn(report.product_name, stored)


if __name__ == "__main__":
    unittest.main()
