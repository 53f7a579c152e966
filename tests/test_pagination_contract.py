import math
import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from pydantic import ValidationError as PydanticValidationError

from ncr_tracker.schemas.pagination import Page, PageRequest


class PageContractTests(unittest.TestCase):
    def test_empty_result_has_no_pages_and_no_neighbours(self):
        page = Page(data=[], total=0, page=1, limit=10)
        self.assertEqual(page.total_pages, 0)
        self.assertFalse(page.has_next)
        self.assertFalse(page.has_prev)

    def test_total_pages_is_ceiling_division(self):
        for total, limit in [(1, 10), (10, 10), (11, 10), (25, 10), (99, 7), (100, 1), (3, 200)]:
            with self.subTest(total=total, limit=limit):
                page = Page(data=[], total=total, page=1, limit=limit)
                self.assertEqual(page.total_pages, math.ceil(total / limit))

    def test_neighbour_flags_track_position(self):
        first = Page(data=[], total=25, page=1, limit=10)
        middle = Page(data=[], total=25, page=2, limit=10)
        last = Page(data=[], total=25, page=3, limit=10)
        beyond = Page(data=[], total=25, page=4, limit=10)
        self.assertEqual((first.has_prev, first.has_next), (False, True))
        self.assertEqual((middle.has_prev, middle.has_next), (True, True))
        self.assertEqual((last.has_prev, last.has_next), (True, False))
        self.assertEqual((beyond.has_prev, beyond.has_next), (True, False))

    def test_derived_fields_are_serialized(self):
        dumped = Page[int](data=[1, 2], total=12, page=1, limit=2).model_dump()
        self.assertEqual(
            dumped,
            {
                "data": [1, 2],
                "total": 12,
                "page": 1,
                "limit": 2,
                "total_pages": 6,
                "has_next": True,
                "has_prev": False,
            },
        )

    def test_derived_fields_cannot_be_supplied(self):
        page = Page(data=[], total=0, page=1, limit=10, has_next=True, total_pages=9)
        self.assertFalse(page.has_next)
        self.assertEqual(page.total_pages, 0)

    def test_page_is_immutable(self):
        page = Page(data=[], total=5, page=1, limit=10)
        with self.assertRaises(PydanticValidationError):
            page.total = 50

    def test_page_request_offset(self):
        self.assertEqual(PageRequest(page=1, limit=10).offset, 0)
        self.assertEqual(PageRequest(page=3, limit=25).offset, 50)


if __name__ == "__main__":
    unittest.main()
