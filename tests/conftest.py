"""
Shared pytest fixtures for all tests.
Provides sample records, stub ranking backends and chat providers so the
search pipeline and AI helpers can be tested without network access.
"""
import json
import sys
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from models import Bond, Case, CheckIn, Client, Document, Payment, RecordSnapshot  # noqa: E402
from smartsearch.providers import RankingRequest  # noqa: E402
from storage import Database, Repositories  # noqa: E402


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_clients() -> List[Client]:
    return [
        Client(
            id="client-1",
            first_name="John",
            last_name="Smith",
            date_of_birth="1985-03-14",
            email="john.smith@example.com",
            phone="555-0100",
            address="12 Elm St",
            city="Houston",
            state="TX",
            zip_code="77002",
        ),
        Client(
            id="client-2",
            first_name="Maria",
            last_name="Garcia",
            date_of_birth="1990-11-02",
            email="maria@example.com",
            city="Dallas",
            state="TX",
        ),
    ]


@pytest.fixture
def sample_cases() -> List[Case]:
    return [
        Case(
            id="case-1",
            case_number="CR-2024-001",
            client_id="client-1",
            charge_type="DUI",
            charge_description="Driving under the influence",
            status="open",
            court_date="2024-06-15",
        ),
        Case(
            id="case-2",
            case_number="CR-2024-002",
            client_id="client-2",
            charge_type="Theft",
            charge_description="Shoplifting",
            status="closed",
        ),
    ]


@pytest.fixture
def sample_bonds() -> List[Bond]:
    return [
        Bond(
            id="bond-1",
            bond_number="BB-1001",
            client_id="client-1",
            case_id="case-1",
            bond_type="surety",
            bond_amount="15499.99",
            premium_amount="1549.99",
            status="active",
            issue_date="2024-02-01",
        ),
        Bond(
            id="bond-2",
            bond_number="BB-1002",
            client_id="client-2",
            case_id="case-2",
            bond_type="cash",
            bond_amount=2500,
            status="completed",
        ),
    ]


@pytest.fixture
def sample_payments() -> List[Payment]:
    return [
        Payment(
            id="payment-1",
            transaction_id="TX-9001",
            bond_id="bond-1",
            client_id="client-1",
            amount="1549.99",
            payment_type="premium",
            payment_method="credit_card",
            payment_date="2024-02-03",
        ),
    ]


@pytest.fixture
def sample_documents() -> List[Document]:
    return [
        Document(
            id="doc-1",
            file_name="smith_contract.pdf",
            category="contract",
            upload_date="2024-02-05T10:30:00Z",
            related_id="client-1",
            related_type="client",
        ),
    ]


@pytest.fixture
def sample_snapshot(sample_clients, sample_cases, sample_bonds, sample_payments, sample_documents) -> RecordSnapshot:
    return RecordSnapshot(
        clients=sample_clients,
        cases=sample_cases,
        bonds=sample_bonds,
        payments=sample_payments,
        documents=sample_documents,
    )


@pytest.fixture
def sample_checkins() -> List[CheckIn]:
    return [
        CheckIn(id="checkin-1", client_id="client-1", bond_id="bond-1", created_at="2024-03-01T09:00:00Z"),
        CheckIn(id="checkin-2", client_id="client-1", bond_id="bond-1", status="failed",
                created_at="2024-03-08T09:00:00Z"),
    ]


# =============================================================================
# Stub Backends and Providers
# =============================================================================

class StubRankingBackend:
    """Records every request and answers with a fixed response (or raises)."""

    def __init__(self, response: Optional[str] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.requests: List[RankingRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def rank(self, request: RankingRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class StubChatProvider:
    name = "stub"

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls = []

    def complete(self, system, user, json_response=False, image=None):
        self.calls.append({"system": system, "user": user, "json_response": json_response, "image": image})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def ranking_response():
    """Build a backend JSON response from (type, id, score) triples."""
    def _build(*items):
        return json.dumps({
            "results": [
                {
                    "type": record_type,
                    "id": record_id,
                    "title": f"{record_type} {record_id}",
                    "description": "ranked remotely",
                    "relevanceScore": score,
                }
                for record_type, record_id, score in items
            ]
        })
    return _build


@pytest.fixture
def stub_backend_factory():
    return StubRankingBackend


@pytest.fixture
def stub_provider_factory():
    return StubChatProvider


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def temp_db(tmp_path):
    db = Database(tmp_path / "baildesk.db")
    yield db
    db.close()


@pytest.fixture
def repos(temp_db) -> Repositories:
    return Repositories(temp_db.connect())
