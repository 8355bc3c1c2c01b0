"""
app/repositories package marker.
"""

from app.repositories.account_repository import AccountRepository
from app.repositories.fact_repository import FactRepository

__all__ = [
    "AccountRepository",
    "FactRepository",
]
