from .cleaner import coerce_number, extract_spend, parse_payload
from .normalizer import RECORD_SCHEMA, normalize_record, normalize_records, records_to_frame

__all__ = [
    "RECORD_SCHEMA",
    "coerce_number",
    "extract_spend",
    "normalize_record",
    "normalize_records",
    "parse_payload",
    "records_to_frame",
]
