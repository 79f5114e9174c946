"""Row normalization package."""

from kiwi_ledger.normalization.normalizer import (
    decode_row,
    normalize,
    parse_ledger_date,
    validate_cells,
)

__all__ = ["decode_row", "normalize", "parse_ledger_date", "validate_cells"]
