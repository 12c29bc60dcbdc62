from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type

from models import Bond, Case, CheckIn, Client, Document, Payment, RecordSnapshot


def _row_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return dict(row)


@dataclass
class _RecordRepo:
    """Upsert/get/list for one record table. Subclasses set the table and model."""

    conn: sqlite3.Connection

    table: ClassVar[str] = ""
    model: ClassVar[Type] = object
    columns: ClassVar[Sequence[str]] = ()
    order_by: ClassVar[str] = "rowid"

    def upsert(self, record: Any) -> None:
        payload = asdict(record) if not isinstance(record, dict) else record
        values = [payload.get(col) for col in self.columns]
        updates = ",\n              ".join(f"{col}=excluded.{col}" for col in self.columns if col != "id")
        self.conn.execute(
            f"""
            INSERT INTO {self.table} ({", ".join(self.columns)})
            VALUES ({", ".join(["?"] * len(self.columns))})
            ON CONFLICT(id) DO UPDATE SET
              {updates};
            """,
            values,
        )

    def get(self, record_id: str) -> Optional[Any]:
        row = self.conn.execute(
            f"SELECT * FROM {self.table} WHERE id = ?;",
            (record_id,),
        ).fetchone()
        data = _row_dict(row)
        return self.model(**data) if data else None

    def list_all(self) -> List[Any]:
        rows = self.conn.execute(f"SELECT * FROM {self.table} ORDER BY {self.order_by};").fetchall()
        return [self.model(**dict(row)) for row in rows]

    def count(self) -> int:
        row = self.conn.execute(f"SELECT COUNT(*) FROM {self.table};").fetchone()
        return int(row[0])


@dataclass
class ClientsRepo(_RecordRepo):
    table: ClassVar[str] = "clients"
    model: ClassVar[Type] = Client
    columns: ClassVar[Sequence[str]] = (
        "id",
        "first_name",
        "last_name",
        "date_of_birth",
        "email",
        "phone",
        "address",
        "city",
        "state",
        "zip_code",
        "status",
    )


@dataclass
class CasesRepo(_RecordRepo):
    table: ClassVar[str] = "cases"
    model: ClassVar[Type] = Case
    columns: ClassVar[Sequence[str]] = (
        "id",
        "case_number",
        "client_id",
        "charge_type",
        "charge_description",
        "status",
        "court_date",
        "arrest_date",
    )


@dataclass
class BondsRepo(_RecordRepo):
    table: ClassVar[str] = "bonds"
    model: ClassVar[Type] = Bond
    columns: ClassVar[Sequence[str]] = (
        "id",
        "bond_number",
        "client_id",
        "case_id",
        "bond_type",
        "bond_amount",
        "premium_amount",
        "status",
        "issue_date",
    )


@dataclass
class PaymentsRepo(_RecordRepo):
    table: ClassVar[str] = "payments"
    model: ClassVar[Type] = Payment
    columns: ClassVar[Sequence[str]] = (
        "id",
        "transaction_id",
        "bond_id",
        "client_id",
        "amount",
        "payment_type",
        "payment_method",
        "status",
        "payment_date",
    )


@dataclass
class DocumentsRepo(_RecordRepo):
    table: ClassVar[str] = "documents"
    model: ClassVar[Type] = Document
    columns: ClassVar[Sequence[str]] = (
        "id",
        "file_name",
        "category",
        "upload_date",
        "related_id",
        "related_type",
    )


@dataclass
class CheckInsRepo(_RecordRepo):
    table: ClassVar[str] = "client_checkins"
    model: ClassVar[Type] = CheckIn
    columns: ClassVar[Sequence[str]] = (
        "id",
        "client_id",
        "bond_id",
        "status",
        "location_name",
        "created_at",
    )

    def list_by_client(self, client_id: str) -> List[CheckIn]:
        rows = self.conn.execute(
            "SELECT * FROM client_checkins WHERE client_id = ? ORDER BY created_at ASC;",
            (client_id,),
        ).fetchall()
        return [CheckIn(**dict(row)) for row in rows]


@dataclass
class Repositories:
    conn: sqlite3.Connection

    @property
    def clients(self) -> ClientsRepo:
        return ClientsRepo(self.conn)

    @property
    def cases(self) -> CasesRepo:
        return CasesRepo(self.conn)

    @property
    def bonds(self) -> BondsRepo:
        return BondsRepo(self.conn)

    @property
    def payments(self) -> PaymentsRepo:
        return PaymentsRepo(self.conn)

    @property
    def documents(self) -> DocumentsRepo:
        return DocumentsRepo(self.conn)

    @property
    def checkins(self) -> CheckInsRepo:
        return CheckInsRepo(self.conn)

    def snapshot(self) -> RecordSnapshot:
        """Every searchable record, unfiltered, in insertion order."""
        return RecordSnapshot(
            clients=self.clients.list_all(),
            cases=self.cases.list_all(),
            bonds=self.bonds.list_all(),
            payments=self.payments.list_all(),
            documents=self.documents.list_all(),
        )

    def counts(self) -> Dict[str, int]:
        return {
            "clients": self.clients.count(),
            "cases": self.cases.count(),
            "bonds": self.bonds.count(),
            "payments": self.payments.count(),
            "documents": self.documents.count(),
            "checkins": self.checkins.count(),
        }


def import_snapshot(repos: Repositories, payload: Dict[str, Any]) -> Dict[str, int]:
    """Load a ``{clients: [...], cases: [...], ...}`` payload; returns rows written per table.

    Rows are written on ``repos.conn`` without committing. Run it inside
    ``Database.session()`` so a failed import leaves no partial rows.
    """
    snapshot = RecordSnapshot.from_dict(payload)
    checkins = [CheckIn.from_dict(item) for item in payload.get("checkins") or []]

    written: Dict[str, int] = {}
    for name, repo, records in (
        ("clients", repos.clients, snapshot.clients),
        ("cases", repos.cases, snapshot.cases),
        ("bonds", repos.bonds, snapshot.bonds),
        ("payments", repos.payments, snapshot.payments),
        ("documents", repos.documents, snapshot.documents),
        ("checkins", repos.checkins, checkins),
    ):
        for record in records:
            repo.upsert(record)
        written[name] = len(records)
    return written
