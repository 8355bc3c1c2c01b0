"""
app/domain package marker.
"""

from app.domain.uploads import (
    ActualsFactInput,
    BatchAccumulator,
    BudgetInput,
    PromotionInput,
    RowError,
    RowMapResult,
    UploadOutcome,
    Uploader,
)

__all__ = [
    "ActualsFactInput",
    "BatchAccumulator",
    "BudgetInput",
    "PromotionInput",
    "RowError",
    "RowMapResult",
    "UploadOutcome",
    "Uploader",
]
