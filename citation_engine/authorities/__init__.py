"""Table of authorities and export."""

from .export import (
    EXPORT_FORMATS,
    bibtex_id,
    export_citations,
    export_table_of_authorities,
    toa_records,
)
from .table import build_table_of_authorities

__all__ = [
    "EXPORT_FORMATS",
    "bibtex_id",
    "build_table_of_authorities",
    "export_citations",
    "export_table_of_authorities",
    "toa_records",
]
