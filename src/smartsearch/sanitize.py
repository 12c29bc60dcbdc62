"""Coarsen identifying fields before records leave the process.

Every projection has a fixed key set. Names become initials, dates become a
year or a month, amounts are rounded to a bucket and file extensions are
replaced with a placeholder. Input records are never modified.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, List, Optional

from models import Bond, Case, Client, Document, Payment, RecordSnapshot

BOND_AMOUNT_BUCKET = 1000
PAYMENT_AMOUNT_BUCKET = 100
FILE_PLACEHOLDER = "[FILE]"

_EXTENSION_RE = re.compile(r"\.(pdf|doc|docx|jpg|jpeg|png)$", re.IGNORECASE)


def parse_date(value: object) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def year_of(value: object) -> Optional[int]:
    parsed = parse_date(value)
    return parsed.year if parsed else None


def month_of(value: object) -> Optional[int]:
    parsed = parse_date(value)
    return parsed.month if parsed else None


def round_to_bucket(value: object, bucket: int) -> Optional[int]:
    """Round half-up to the nearest multiple of ``bucket``; zero or unparseable → None."""
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount == 0:
        return None
    with localcontext() as ctx:
        # room for every integer digit of the quotient
        ctx.prec = max(28, amount.adjusted() + 2)
        buckets = (amount / bucket).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(buckets) * bucket


def initials(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{(first_name or '')[:1]}{(last_name or '')[:1]}"


def sanitize_file_name(file_name: Optional[str]) -> Optional[str]:
    if file_name is None:
        return None
    return _EXTENSION_RE.sub(FILE_PLACEHOLDER, file_name)


def sanitize_client(client: Client) -> Dict[str, Any]:
    return {
        "id": client.id,
        "initials": initials(client.first_name, client.last_name),
        "generalLocation": client.city or "Unknown",
        "yearOfBirth": year_of(client.date_of_birth),
    }


def sanitize_case(case: Case) -> Dict[str, Any]:
    return {
        "id": case.id,
        "caseNumber": case.case_number,
        "chargeType": case.charge_type,
        "status": case.status,
        "courtYear": year_of(case.court_date),
    }


def sanitize_bond(bond: Bond) -> Dict[str, Any]:
    return {
        "id": bond.id,
        "bondNumber": bond.bond_number,
        "bondType": bond.bond_type,
        "bondAmount": round_to_bucket(bond.bond_amount, BOND_AMOUNT_BUCKET),
        "status": bond.status,
    }


def sanitize_payment(payment: Payment) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "amount": round_to_bucket(payment.amount, PAYMENT_AMOUNT_BUCKET),
        "month": month_of(payment.payment_date),
        "paymentMethod": payment.payment_method,
        "status": payment.status,
    }


def sanitize_document(document: Document) -> Dict[str, Any]:
    return {
        "id": document.id,
        "fileName": sanitize_file_name(document.file_name),
        "category": document.category,
        "uploadMonth": month_of(document.upload_date),
    }


def sanitize_snapshot(snapshot: RecordSnapshot) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "clients": [sanitize_client(item) for item in snapshot.clients],
        "cases": [sanitize_case(item) for item in snapshot.cases],
        "bonds": [sanitize_bond(item) for item in snapshot.bonds],
        "payments": [sanitize_payment(item) for item in snapshot.payments],
        "documents": [sanitize_document(item) for item in snapshot.documents],
    }
