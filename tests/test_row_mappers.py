"""
tests/test_row_mappers.py

Pytest unit tests for the per-kind row mappers.

Mappers are pure: header resolution plus row mapping, no database.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from app.domain.uploads import ActualsFactInput, BudgetInput, PromotionInput
from app.mappers import ActualsWideMapper, BudgetMapper, PromotionsMapper, get_row_mapper
from app.mappers.actuals import find_week_columns
from app.validators.mapping_validator import SchemaMappingError
from db.models.upload_batch import UploadKind

ACTUALS_HEADER = ["Geography", "Product", "Week Ending 01-07-24", "Week Ending 01-14-24"]

PROMOTIONS_HEADER = [
    "Deal ID",
    "Call Point",
    "Promo Status",
    "Promo Type (Retail)",
    "PPG",
    "Promo Start Date",
    "Promo End Date",
    "Scan Back (per cs)",
    "DA",
    "Forecasted Volume",
    "Circana Geography",
    "RTM",
]

BUDGET_HEADER = [
    "Call Point",
    "PPG - Item",
    "Weeks",
    "Weekly Volume (cases per store)",
    "Total Cases Budgeted",
    "TR Share of Discount",
    "Scan Back $ (per case)",
    "TR Net Revenue",
]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (UploadKind.ACTUALS_WIDE, ActualsWideMapper),
        (UploadKind.PROMOTIONS, PromotionsMapper),
        (UploadKind.BUDGET, BudgetMapper),
    ],
)
def test_one_mapper_per_kind(kind, expected) -> None:
    assert isinstance(get_row_mapper(kind), expected)


def test_upload_kind_parse() -> None:
    assert UploadKind.parse(" Promotions ") is UploadKind.PROMOTIONS
    with pytest.raises(ValueError):
        UploadKind.parse("actuals")
    with pytest.raises(ValueError):
        UploadKind.parse(None)


# ---------------------------------------------------------------------------
# Actuals (wide)
# ---------------------------------------------------------------------------


class TestActualsWideMapper:
    @pytest.fixture()
    def mapper(self) -> ActualsWideMapper:
        return ActualsWideMapper()

    def test_week_columns_parsed_once(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)

        assert [week.week_end_date for week in columns.week_columns] == [
            date(2024, 1, 7),
            date(2024, 1, 14),
        ]

    def test_unparsable_week_headers_are_ignored(self) -> None:
        weeks = find_week_columns(["Week Ending 13-45-24", "week ending 2-4-25", "Week Ending"])

        assert [(week.index, week.week_end_date) for week in weeks] == [(1, date(2025, 2, 4))]

    def test_unpivots_one_fact_per_week(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)
        result = mapper.map_row(["Publix", "Cola 12pk", "1,200", "950"], columns, row_number=2)

        assert result.facts == (
            ActualsFactInput("Publix", "Cola 12pk", date(2024, 1, 7), Decimal("1200")),
            ActualsFactInput("Publix", "Cola 12pk", date(2024, 1, 14), Decimal("950")),
        )
        assert result.dimension_keys == ("Publix",)
        assert result.errors == ()

    def test_blank_cells_are_skipped_without_error(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)
        result = mapper.map_row(["Publix", "Cola", "", "-"], columns, row_number=2)

        assert result.facts == ()
        assert result.errors == ()
        assert result.dimension_keys == ("Publix",)

    def test_zero_volume_is_a_fact(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)
        result = mapper.map_row(["Publix", "Cola", "0", ""], columns, row_number=2)

        assert [fact.volume for fact in result.facts] == [Decimal("0")]

    def test_negative_volume_is_row_error(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)
        result = mapper.map_row(["Publix", "Cola", "-5", "10"], columns, row_number=7)

        assert len(result.facts) == 1
        assert result.facts[0].week_end_date == date(2024, 1, 14)
        (error,) = result.errors
        assert error.row_number == 7
        assert error.message.startswith("Negative volume not allowed")
        assert error.row_json["week_end_date"] == "2024-01-07"
        assert error.row_json["volume"] == "-5"

    def test_row_without_geography_or_product_is_skipped(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)

        assert mapper.map_row(["", "Cola", "5", "5"], columns, row_number=2).is_empty
        assert mapper.map_row(["Publix", " ", "5", "5"], columns, row_number=3).is_empty

    def test_short_row_reads_missing_weeks_as_blank(self, mapper: ActualsWideMapper) -> None:
        columns = mapper.resolve_columns(ACTUALS_HEADER)
        result = mapper.map_row(["Publix", "Cola", "3"], columns, row_number=2)

        assert len(result.facts) == 1

    def test_missing_product_column_fails(self, mapper: ActualsWideMapper) -> None:
        with pytest.raises(SchemaMappingError) as exc_info:
            mapper.resolve_columns(["Geography", "Week Ending 01-07-24"])

        assert exc_info.value.message == "Actuals CSV must contain Geography and Product columns"

    def test_missing_week_columns_fails(self, mapper: ActualsWideMapper) -> None:
        with pytest.raises(SchemaMappingError) as exc_info:
            mapper.resolve_columns(["Geography", "Product", "Total"])

        assert "Week Ending" in exc_info.value.message


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------


class TestPromotionsMapper:
    @pytest.fixture()
    def mapper(self) -> PromotionsMapper:
        return PromotionsMapper()

    def test_maps_full_row(self, mapper: PromotionsMapper) -> None:
        columns = mapper.resolve_columns(PROMOTIONS_HEADER)
        row = [
            "D-100",
            "Publix - Atlanta Division",
            "Planned",
            "TPR",
            "Cola 12pk",
            "3/4/2025",
            "3/31/2025",
            "$1.25",
            "$0.40",
            "2,000",
            "Publix Total",
            "DSD",
        ]
        result = mapper.map_row(row, columns, row_number=2)

        (fact,) = result.facts
        assert isinstance(fact, PromotionInput)
        assert fact.deal_id == "D-100"
        assert fact.promo_type == "TPR"
        assert fact.promo_start_date == date(2025, 3, 4)
        assert fact.promo_end_date == date(2025, 3, 31)
        assert fact.cost_start_date is None
        assert fact.scan_back_per_case == Decimal("1.25")
        assert fact.tr_share_of_discount == Decimal("0.40")
        assert fact.forecasted_volume == Decimal("2000")
        assert fact.geography == "Publix Total"
        assert fact.route_to_market == "DSD"
        assert fact.row_json["Deal ID"] == "D-100"
        assert fact.row_json["Promo Type (Retail)"] == "TPR"
        assert result.dimension_keys == ("Publix - Atlanta Division",)

    def test_unparsable_optional_fields_are_null(self, mapper: PromotionsMapper) -> None:
        columns = mapper.resolve_columns(PROMOTIONS_HEADER)
        row = ["D-1", "Kroger", "Active", "", "Chips", "soon", "", "n/a", "-", "", "", ""]
        (fact,) = mapper.map_row(row, columns, row_number=2).facts

        assert fact.promo_start_date is None
        assert fact.scan_back_per_case is None
        assert fact.tr_share_of_discount is None
        assert fact.promo_type is None
        assert fact.geography is None

    def test_row_kept_when_only_deal_id_present(self, mapper: PromotionsMapper) -> None:
        columns = mapper.resolve_columns(PROMOTIONS_HEADER)
        result = mapper.map_row(["D-9", "", "Ended"], columns, row_number=4)

        assert len(result.facts) == 1
        assert result.dimension_keys == ()

    def test_row_skipped_when_all_keys_empty(self, mapper: PromotionsMapper) -> None:
        columns = mapper.resolve_columns(PROMOTIONS_HEADER)

        assert mapper.map_row(["", "", "Planned", "TPR", ""], columns, row_number=2).is_empty

    def test_alias_headers(self, mapper: PromotionsMapper) -> None:
        columns = mapper.resolve_columns(["DealID", "Customer", "Status", "PPG Item", "Depletion Allowance"])
        (fact,) = mapper.map_row(["D-2", "Kroger", "Active", "Chips", "$0.10"], columns, row_number=2).facts

        assert fact.call_point == "Kroger"
        assert fact.ppg == "Chips"
        assert fact.tr_share_of_discount == Decimal("0.10")

    def test_missing_required_columns_fails(self, mapper: PromotionsMapper) -> None:
        with pytest.raises(SchemaMappingError) as exc_info:
            mapper.resolve_columns(["Deal ID", "Call Point", "PPG"])

        assert exc_info.value.message == (
            "Promotions CSV missing required columns (Deal ID, Call Point, Promo Status, PPG)"
        )


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


class TestBudgetMapper:
    @pytest.fixture()
    def mapper(self) -> BudgetMapper:
        return BudgetMapper()

    def test_maps_full_row(self, mapper: BudgetMapper) -> None:
        columns = mapper.resolve_columns(BUDGET_HEADER)
        row = ["Kroger", "Chips 6oz", "Wk 1-13", "2.5", "12,000", "$0.30", "$1.10", "$15,400.00"]
        result = mapper.map_row(row, columns, row_number=2)

        (fact,) = result.facts
        assert fact == BudgetInput(
            call_point="Kroger",
            ppg_item="Chips 6oz",
            weeks_text="Wk 1-13",
            weekly_volume_per_store=Decimal("2.5"),
            total_cases_budgeted=Decimal("12000"),
            tr_share_of_discount=Decimal("0.30"),
            scan_back_per_case=Decimal("1.10"),
            tr_net_revenue=Decimal("15400.00"),
            row_json=dict(zip(BUDGET_HEADER, row)),
        )
        assert result.dimension_keys == ("Kroger",)

    def test_optional_columns_absent(self, mapper: BudgetMapper) -> None:
        columns = mapper.resolve_columns(["Callpoint", "PPG", "Total Cases"])
        (fact,) = mapper.map_row(["Kroger", "Chips", "-"], columns, row_number=2).facts

        assert fact.total_cases_budgeted is None
        assert fact.weeks_text is None
        assert fact.tr_net_revenue is None

    @pytest.mark.parametrize("row", [["", "Chips", "10"], ["Kroger", "", "10"]])
    def test_row_skipped_without_call_point_or_product(self, mapper: BudgetMapper, row) -> None:
        columns = mapper.resolve_columns(["Call Point", "PPG - Item", "Total Cases Budgeted"])

        assert mapper.map_row(row, columns, row_number=2).is_empty

    def test_missing_total_column_fails(self, mapper: BudgetMapper) -> None:
        with pytest.raises(SchemaMappingError) as exc_info:
            mapper.resolve_columns(["Call Point", "PPG - Item"])

        assert "Total Cases Budgeted" in exc_info.value.message
