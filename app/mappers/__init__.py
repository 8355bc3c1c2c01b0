"""
app/mappers package marker.

Each upload kind has exactly one row mapper, chosen once at batch start.
"""

from db.models.upload_batch import UploadKind
from app.mappers.actuals import ActualsWideMapper
from app.mappers.base import BaseRowMapper
from app.mappers.budget import BudgetMapper
from app.mappers.header_resolver import ColumnSpec, HeaderResolver, ResolvedColumns, WeekColumn
from app.mappers.promotions import PromotionsMapper

ROW_MAPPERS: dict[UploadKind, type[BaseRowMapper]] = {
    UploadKind.ACTUALS_WIDE: ActualsWideMapper,
    UploadKind.PROMOTIONS: PromotionsMapper,
    UploadKind.BUDGET: BudgetMapper,
}


def get_row_mapper(kind: UploadKind) -> BaseRowMapper:
    return ROW_MAPPERS[kind]()


__all__ = [
    "ROW_MAPPERS",
    "ActualsWideMapper",
    "BaseRowMapper",
    "BudgetMapper",
    "ColumnSpec",
    "HeaderResolver",
    "PromotionsMapper",
    "ResolvedColumns",
    "WeekColumn",
    "get_row_mapper",
]
