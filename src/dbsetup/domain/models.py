from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

class Credentials(BaseModel):
    """
    Endpoint address and public access key entered by the user.
    Only non-emptiness is checked before use; malformed values surface
    as probe failures.
    """
    endpoint: str = ""
    access_key: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.endpoint.strip()) and bool(self.access_key.strip())

    def masked_key(self) -> str:
        if len(self.access_key) <= 8:
            return "*" * len(self.access_key)
        return f"{self.access_key[:4]}...{self.access_key[-4:]}"

class QueryError(BaseModel):
    """Freeform failure reported by a remote store query."""
    message: str
    code: Optional[str] = None
    status_code: Optional[int] = None
    details: Optional[str] = None
    hint: Optional[str] = None
    # Raised by the transport (DNS, TLS, refused, timeout) rather than answered by the store
    transport: bool = False

class QueryResult(BaseModel):
    resource: str
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

class ErrorKind(str, Enum):
    ABSENT = "absent"
    PERMISSION_DENIED = "permission_denied"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"

class ProbeResult(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    AMBIGUOUS = "ambiguous"

class ExpectedResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    field: str

EXPECTED_RESOURCES: List[ExpectedResource] = [
    ExpectedResource(name="products", label="Products", field="has_products"),
    ExpectedResource(name="sales", label="Sales", field="has_sales"),
    ExpectedResource(name="profiles", label="Profiles", field="has_profiles"),
    ExpectedResource(name="shop_settings", label="Shop Settings", field="has_shop_settings"),
]

class ResourceCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource: ExpectedResource
    result: ProbeResult
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

class SchemaStatus(BaseModel):
    """Outcome of one schema detection run. Replaced, never updated."""
    model_config = ConfigDict(frozen=True)

    has_products: bool
    has_sales: bool
    has_profiles: bool
    has_shop_settings: bool
    is_complete: bool

    @classmethod
    def from_flags(cls, flags: Dict[str, bool]) -> "SchemaStatus":
        values = {res.field: flags[res.field] for res in EXPECTED_RESOURCES}
        return cls(**values, is_complete=all(values.values()))

    @property
    def missing(self) -> List[str]:
        return [res.label for res in EXPECTED_RESOURCES if not getattr(self, res.field)]

    def summary_lines(self) -> List[str]:
        lines = [
            f"{'✓' if getattr(self, res.field) else '✗'} {res.label}"
            for res in EXPECTED_RESOURCES
        ]
        if self.is_complete:
            lines.append('✓ Schema is complete! Run "connect" to save the configuration.')
        else:
            lines.append("⚠ Schema incomplete. Copy and run the SQL schema first.")
        return lines

class SchemaReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SchemaStatus
    checks: List[ResourceCheck]

    @property
    def ambiguous(self) -> List[ResourceCheck]:
        return [c for c in self.checks if c.result == ProbeResult.AMBIGUOUS]

class ConnectivityReport(BaseModel):
    reachable: bool
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    latency_ms: Optional[float] = None

class WizardState(str, Enum):
    IDLE = "idle"
    CONNECTIVITY_TESTING = "connectivity_testing"
    SCHEMA_DETECTING = "schema_detecting"
    SUCCESS = "success"

class Redirect(BaseModel):
    """Navigation command handed back to the caller instead of performed."""
    model_config = ConfigDict(frozen=True)

    target: str = "/"
    delay_seconds: float = 0.0

class OperationOutcome(BaseModel):
    """What a user-facing wizard operation produced."""
    ok: bool
    rejected: bool = False
    message: Optional[str] = None
    connectivity: Optional[ConnectivityReport] = None
    schema_report: Optional[SchemaReport] = None
    redirect: Optional[Redirect] = None
