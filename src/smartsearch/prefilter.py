from __future__ import annotations

from typing import Dict, List, Sequence

from models import Record, RecordSnapshot

# Terms of this length or shorter are dropped before prefiltering.
PREFILTER_MIN_TERM_LENGTH = 2
PREFILTER_LIMIT_PER_TYPE = 20

PREFILTER_FIELDS: Dict[str, Sequence[str]] = {
    "client": ("first_name", "last_name"),
    "case": ("case_number", "charge_type", "charge_description"),
    "bond": ("bond_number", "bond_type"),
    "payment": ("payment_method",),
    "document": ("file_name", "category"),
}


def extract_terms(query: str, min_length: int) -> List[str]:
    """Lowercased whitespace-delimited terms strictly longer than ``min_length``."""
    return [term for term in query.lower().split() if len(term) > min_length]


def _field_text(record: Record, name: str) -> str:
    value = getattr(record, name, None)
    if value is None:
        return ""
    return str(value).lower()


def _matches(record: Record, terms: Sequence[str], field_names: Sequence[str]) -> bool:
    texts = [_field_text(record, name) for name in field_names]
    return any(term in text for term in terms for text in texts)


def filter_records(
    records: Sequence[Record],
    terms: Sequence[str],
    field_names: Sequence[str],
    limit: int = PREFILTER_LIMIT_PER_TYPE,
) -> list:
    if not terms:
        return []
    kept = []
    for record in records:
        if _matches(record, terms, field_names):
            kept.append(record)
            if len(kept) >= limit:
                break
    return kept


def prefilter_records(query: str, snapshot: RecordSnapshot) -> RecordSnapshot:
    terms = extract_terms(query, PREFILTER_MIN_TERM_LENGTH)
    filtered = {
        record_type: filter_records(records, terms, PREFILTER_FIELDS[record_type])
        for record_type, records in snapshot.groups()
    }
    return RecordSnapshot(
        clients=filtered["client"],
        cases=filtered["case"],
        bonds=filtered["bond"],
        payments=filtered["payment"],
        documents=filtered["document"],
    )
