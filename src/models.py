from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union


def _pick(data: Dict[str, Any], snake: str, camel: Optional[str] = None) -> Any:
    """Read a value by its snake_case key, falling back to the camelCase one."""
    if snake in data:
        return data[snake]
    if camel and camel in data:
        return data[camel]
    return None


def _from_dict(cls, data: Dict[str, Any], aliases: Dict[str, str]):
    values = {}
    for item in fields(cls):
        value = _pick(data, item.name, aliases.get(item.name))
        if value is not None:
            values[item.name] = value
    return cls(**values)


@dataclass
class Client:
    """A person the agency has written (or may write) a bond for"""
    id: str
    first_name: str
    last_name: str
    date_of_birth: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    status: str = "active"  # active, inactive, high_risk

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        return _from_dict(cls, data, {
            "first_name": "firstName",
            "last_name": "lastName",
            "date_of_birth": "dateOfBirth",
            "zip_code": "zipCode",
        })


@dataclass
class Case:
    """A criminal case a client is bonded out on"""
    id: str
    case_number: str
    client_id: Optional[str] = None
    charge_type: Optional[str] = None
    charge_description: Optional[str] = None
    status: str = "open"  # open, closed, dismissed
    court_date: Optional[str] = None
    arrest_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Case":
        return _from_dict(cls, data, {
            "case_number": "caseNumber",
            "client_id": "clientId",
            "charge_type": "chargeType",
            "charge_description": "chargeDescription",
            "court_date": "courtDate",
            "arrest_date": "arrestDate",
        })


@dataclass
class Bond:
    id: str
    bond_number: str
    client_id: Optional[str] = None
    case_id: Optional[str] = None
    bond_type: Optional[str] = None
    bond_amount: Optional[Union[float, str]] = None
    premium_amount: Optional[Union[float, str]] = None
    status: str = "active"  # active, completed, forfeited, at_risk
    issue_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bond":
        return _from_dict(cls, data, {
            "bond_number": "bondNumber",
            "client_id": "clientId",
            "case_id": "caseId",
            "bond_type": "bondType",
            "bond_amount": "bondAmount",
            "premium_amount": "premiumAmount",
            "issue_date": "issueDate",
        })


@dataclass
class Payment:
    id: str
    transaction_id: Optional[str] = None
    bond_id: Optional[str] = None
    client_id: Optional[str] = None
    amount: Optional[Union[float, str]] = None
    payment_type: Optional[str] = None  # premium, collateral_return, fee
    payment_method: Optional[str] = None  # cash, check, credit_card, bank_transfer
    status: str = "completed"
    payment_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payment":
        return _from_dict(cls, data, {
            "transaction_id": "transactionId",
            "bond_id": "bondId",
            "client_id": "clientId",
            "payment_type": "paymentType",
            "payment_method": "paymentMethod",
            "payment_date": "paymentDate",
        })


@dataclass
class Document:
    id: str
    file_name: Optional[str] = None
    category: Optional[str] = None  # contract, court_papers, identification, financial
    upload_date: Optional[str] = None
    related_id: Optional[str] = None
    related_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return _from_dict(cls, data, {
            "file_name": "fileName",
            "upload_date": "uploadDate",
            "related_id": "relatedId",
            "related_type": "relatedType",
        })


@dataclass
class CheckIn:
    """A client check-in recorded through the portal"""
    id: str
    client_id: str
    bond_id: Optional[str] = None
    status: str = "completed"  # completed, failed, pending_review
    location_name: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckIn":
        return _from_dict(cls, data, {
            "client_id": "clientId",
            "bond_id": "bondId",
            "location_name": "locationName",
            "created_at": "createdAt",
        })


Record = Union[Client, Case, Bond, Payment, Document]

RECORD_TYPES = ("client", "case", "bond", "payment", "document")


@dataclass
class RecordSnapshot:
    """The five record arrays a search runs against"""
    clients: List[Client] = field(default_factory=list)
    cases: List[Case] = field(default_factory=list)
    bonds: List[Bond] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("clients", "cases", "bonds", "payments", "documents"):
            value = getattr(self, name)
            if not isinstance(value, (list, tuple)):
                raise TypeError(f"{name} must be a list of records, got {type(value).__name__}")

    def groups(self):
        """(record_type, records) pairs in the fixed client → document order"""
        return [
            ("client", self.clients),
            ("case", self.cases),
            ("bond", self.bonds),
            ("payment", self.payments),
            ("document", self.documents),
        ]

    @property
    def total(self) -> int:
        return sum(len(records) for _, records in self.groups())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordSnapshot":
        return cls(
            clients=[Client.from_dict(item) for item in data.get("clients") or []],
            cases=[Case.from_dict(item) for item in data.get("cases") or []],
            bonds=[Bond.from_dict(item) for item in data.get("bonds") or []],
            payments=[Payment.from_dict(item) for item in data.get("payments") or []],
            documents=[Document.from_dict(item) for item in data.get("documents") or []],
        )


@dataclass
class SearchResult:
    record_type: str  # one of RECORD_TYPES
    record_id: str
    title: str
    description: str
    relevance_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.record_type,
            "id": self.record_id,
            "title": self.title,
            "description": self.description,
            "relevanceScore": self.relevance_score,
        }


@dataclass
class PhotoVerificationResult:
    is_valid_photo: bool
    confidence: float
    person_detected: bool
    quality: str  # high, medium, low
    issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValidPhoto": self.is_valid_photo,
            "confidence": self.confidence,
            "personDetected": self.person_detected,
            "quality": self.quality,
            "issues": list(self.issues),
        }


@dataclass
class ComplianceAnalysis:
    compliance_status: str  # compliant, warning, non-compliant
    risk_level: str  # low, medium, high
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "complianceStatus": self.compliance_status,
            "riskLevel": self.risk_level,
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
        }
