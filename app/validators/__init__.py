"""
app/validators package marker.
"""

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError
from app.validators.value_parsers import (
    normalize_header,
    parse_date_mdyyyy,
    parse_date_mmddyy,
    parse_money,
    parse_number,
)

__all__ = [
    "MappingErrorDetail",
    "MappingValidator",
    "SchemaMappingError",
    "normalize_header",
    "parse_date_mdyyyy",
    "parse_date_mmddyy",
    "parse_money",
    "parse_number",
]
