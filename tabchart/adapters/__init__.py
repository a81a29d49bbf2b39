from .extract import Extraction, coerce_number, extract_dataset
from .table import parse_rows

__all__ = ["Extraction", "coerce_number", "extract_dataset", "parse_rows"]
