from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from models import Bond, Case, Client, Document, Payment, RecordSnapshot, SearchResult

from .prefilter import extract_terms

# Looser than the prefilter: two-letter terms still count here.
FALLBACK_MIN_TERM_LENGTH = 1
FALLBACK_RESULT_LIMIT = 10

_EMAIL_RE = re.compile(r"(.{2}).*(@.*)")


def mask_email(email: Optional[str]) -> str:
    if not email:
        return "N/A"
    return _EMAIL_RE.sub(r"\1***\2", email, count=1)


def _format_amount(value: object) -> str:
    if value is None or value == "":
        return "N/A"
    try:
        return f"${Decimal(str(value)):,.2f}"
    except (InvalidOperation, ValueError):
        return str(value)


def _join(*values: object) -> str:
    return " ".join("" if value is None else str(value) for value in values).lower()


def _client_entry(client: Client) -> Tuple[str, str, str]:
    return (
        _join(client.first_name, client.last_name, client.email),
        f"{client.first_name} {client.last_name}",
        f"Email: {mask_email(client.email)}",
    )


def _case_entry(case: Case) -> Tuple[str, str, str]:
    return (
        _join(case.case_number, case.charge_type, case.charge_description),
        f"Case {case.case_number}",
        f"{case.charge_type or 'Unknown charge'} - {case.status}",
    )


def _bond_entry(bond: Bond) -> Tuple[str, str, str]:
    return (
        _join(bond.bond_number, bond.bond_type),
        f"Bond {bond.bond_number}",
        f"{bond.bond_type or 'Unknown type'} - {_format_amount(bond.bond_amount)} - {bond.status}",
    )


def _payment_entry(payment: Payment) -> Tuple[str, str, str]:
    return (
        _join(payment.transaction_id, payment.payment_method, payment.payment_type),
        f"Payment {payment.transaction_id or payment.id}",
        f"{payment.payment_method or 'Unknown method'} - {payment.status}",
    )


def _document_entry(document: Document) -> Tuple[str, str, str]:
    return (
        _join(document.file_name, document.category),
        document.file_name or f"Document {document.id}",
        f"Category: {document.category or 'uncategorized'}",
    )


ENTRY_BUILDERS: Dict[str, Callable[..., Tuple[str, str, str]]] = {
    "client": _client_entry,
    "case": _case_entry,
    "bond": _bond_entry,
    "payment": _payment_entry,
    "document": _document_entry,
}


def term_match_ratio(text: str, terms: Sequence[str]) -> float:
    if not terms:
        return 0.0
    matched = sum(1 for term in terms if term in text)
    return matched / float(len(terms))


def rank_scores(scores: List[float]) -> List[int]:
    """Indices by descending score; equal scores keep their original order."""
    if not scores:
        return []
    return [int(idx) for idx in np.argsort(-np.array(scores, dtype=float), kind="stable")]


def rank_locally(
    query: str,
    snapshot: RecordSnapshot,
    limit: int = FALLBACK_RESULT_LIMIT,
) -> List[SearchResult]:
    """Score every record by the share of query terms it contains.

    Pure in-memory substring matching over the full snapshot. Records that
    match no term are dropped; the rest are ordered by score with ties kept in
    client, case, bond, payment, document insertion order.
    """
    terms = extract_terms(query, FALLBACK_MIN_TERM_LENGTH)
    if not terms:
        return []

    candidates: List[SearchResult] = []
    for record_type, records in snapshot.groups():
        build = ENTRY_BUILDERS[record_type]
        for record in records:
            text, title, description = build(record)
            score = term_match_ratio(text, terms)
            if score <= 0:
                continue
            candidates.append(
                SearchResult(
                    record_type=record_type,
                    record_id=str(record.id),
                    title=title,
                    description=description,
                    relevance_score=score,
                )
            )

    order = rank_scores([item.relevance_score for item in candidates])
    return [candidates[idx] for idx in order[:limit]]
