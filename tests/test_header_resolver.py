from __future__ import annotations

import itertools
import unittest

from app.mappers.header_resolver import (
    ColumnSpec,
    HeaderResolver,
    find_header_index,
    find_header_index_starts_with,
)
from app.validators.mapping_validator import SchemaMappingError


class TestFindHeaderIndex(unittest.TestCase):
    def test_match_ignores_case_and_whitespace_noise(self) -> None:
        headers = ["  deal id ", "CALL   POINT", "Promo Status"]

        self.assertEqual(find_header_index(headers, ["Deal ID"]), 0)
        self.assertEqual(find_header_index(headers, ["Call Point"]), 1)

    def test_alias_priority_wins_over_column_order(self) -> None:
        headers = ["Customer", "Call Point"]

        self.assertEqual(find_header_index(headers, ["Call Point", "Customer"]), 1)
        self.assertEqual(find_header_index(headers, ["Customer", "Call Point"]), 0)

    def test_returns_none_when_nothing_matches(self) -> None:
        self.assertIsNone(find_header_index(["Geography"], ["Product"]))

    def test_exact_match_does_not_accept_prefixes(self) -> None:
        self.assertIsNone(find_header_index(["Promo Type (Retail)"], ["Promo Type"]))

    def test_prefix_match_for_variable_suffix(self) -> None:
        headers = ["Deal ID", "Promo Type (Retail)"]

        self.assertEqual(find_header_index_starts_with(headers, ["Promo Type"]), 1)
        self.assertIsNone(find_header_index_starts_with(headers, ["Tactic"]))


class TestHeaderResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = HeaderResolver(
            (
                ColumnSpec("deal_id", ("Deal ID", "DealID"), required=True),
                ColumnSpec("call_point", ("Call Point", "Customer"), required=True),
                ColumnSpec("promo_type", ("Promo Type",), prefix_match=True),
                ColumnSpec("geography", ("Geography",)),
            ),
            failure_message="Promotions CSV missing required columns",
        )

    def test_resolves_required_and_optional_fields(self) -> None:
        columns = self.resolver.resolve(["DealID", " customer ", "Promo Type - Lift", "Notes"])

        self.assertEqual(columns.index_of("deal_id"), 0)
        self.assertEqual(columns.index_of("call_point"), 1)
        self.assertEqual(columns.index_of("promo_type"), 2)
        self.assertIsNone(columns.index_of("geography"))
        self.assertEqual(columns.match_strategies["promo_type"], "prefix")
        self.assertEqual(columns.match_strategies["deal_id"], "exact_or_alias")
        self.assertNotIn("geography", columns.match_strategies)

    def test_headers_are_normalized(self) -> None:
        columns = self.resolver.resolve(["Deal ID", "Call  Point"])

        self.assertEqual(columns.headers, ("Deal ID", "Call Point"))

    def test_unresolved_optional_field_reads_blank(self) -> None:
        columns = self.resolver.resolve(["Deal ID", "Call Point"])

        self.assertEqual(columns.cell(["D-1", "Publix"], "geography"), "")

    def test_short_row_reads_blank(self) -> None:
        columns = self.resolver.resolve(["Deal ID", "Call Point"])

        self.assertEqual(columns.cell(["D-1"], "call_point"), "")
        self.assertEqual(columns.snapshot(["D-1"]), {"Deal ID": "D-1", "Call Point": None})

    def test_missing_required_field_uses_failure_message(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.resolver.resolve(["Deal ID", "Geography"])

        self.assertEqual(ctx.exception.message, "Promotions CSV missing required columns")
        missing = [
            error.canonical_field
            for error in ctx.exception.errors
            if error.code == "required_field_unmapped"
        ]
        self.assertEqual(missing, ["call_point"])

    def test_blank_header_row_is_rejected(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.resolver.resolve(["", "  "])

        self.assertEqual(ctx.exception.errors[0].code, "empty_headers")

    def test_resolution_is_independent_of_column_order(self) -> None:
        headers = ("Deal ID", "Customer", "Call Point", "Promo Type (Retail)", "Geography", "Notes")
        expected = {
            "deal_id": "Deal ID",
            "call_point": "Call Point",
            "promo_type": "Promo Type (Retail)",
            "geography": "Geography",
        }

        for order in itertools.permutations(headers):
            with self.subTest(order=order):
                columns = self.resolver.resolve(list(order))
                resolved = {field: columns.headers[columns.index_of(field)] for field in expected}
                self.assertEqual(resolved, expected)


if __name__ == "__main__":
    unittest.main()
