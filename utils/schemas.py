"""
Pydantic Schemas - Data Validation Models

Defines all Pydantic schemas used throughout the top-up pipeline:
- Company and user input records (strict field types)
- Enriched users and company groups produced by the pipeline
- Rejected (dead-letter) records with their error reason
- API request/response payloads

Usage:
    from utils.schemas import UserRecord

    user = UserRecord.model_validate(raw_data)
    balance = user.tokens
"""

from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    computed_field,
    field_validator,
)


class EntityKind(str, Enum):
    """Kind of raw record being validated."""

    COMPANY = "company"
    USER = "user"


class CompanyRecord(BaseModel):
    """Company record schema.

    Validates against requirements:
    - id: integer (booleans and floats rejected)
    - name: string
    - top_up: integer, any sign
    - email_status: boolean; absent or non-boolean values read as False
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: StrictInt = Field(..., description="Company ID")
    name: StrictStr = Field(..., description="Company name")
    top_up: StrictInt = Field(..., description="Tokens granted to each eligible user")
    email_status: bool = Field(default=False, description="Company-wide permission to email")

    @field_validator("email_status", mode="before")
    @classmethod
    def coerce_email_status(cls, v: Any) -> bool:
        """Only a real boolean True grants permission; anything else means no email."""
        return v if isinstance(v, bool) else False


class UserRecord(BaseModel):
    """User record schema.

    Validates against requirements:
    - company_id: integer
    - last_name: string (may be empty)
    - active_status: boolean
    - email_status: boolean
    - tokens: integer, any sign
    - first_name, email: unchecked, rendered as-is
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    company_id: StrictInt = Field(..., description="Foreign key into companies")
    last_name: StrictStr = Field(..., description="Last name")
    active_status: StrictBool = Field(..., description="Only active users are eligible")
    email_status: StrictBool = Field(..., description="User-side permission to email")
    tokens: StrictInt = Field(..., description="Current token balance")
    first_name: Any = Field(default=None, description="First name")
    email: Any = Field(default=None, description="Email address, display only")


class EnrichedUser(UserRecord):
    """Eligible user joined with its company and the derived top-up fields."""

    company_name: str
    top_up_amount: int
    new_token_balance: int
    should_send_email: bool


class CompanyGroup(BaseModel):
    """A company with its sorted eligible users."""

    model_config = ConfigDict(frozen=True)

    company: CompanyRecord
    users: list[EnrichedUser] = Field(default_factory=list)

    @computed_field
    @property
    def total_top_up(self) -> int:
        return sum(user.top_up_amount for user in self.users)


class RejectedRecord(BaseModel):
    """Dead-letter record: the original payload plus why it was dropped."""

    kind: EntityKind
    index: int = Field(..., description="Position in the source collection")
    error_reason: str
    record: Any = None


class RunStats(BaseModel):
    """Counters summarising one pipeline run."""

    companies_total: int = 0
    companies_valid: int = 0
    users_total: int = 0
    users_eligible: int = 0
    users_rejected: int = 0


class ProcessRequest(BaseModel):
    """Body of POST /api/process."""

    users: Optional[Any] = None
    companies: Optional[Any] = None


class ProcessResponse(BaseModel):
    """Successful response of POST /api/process."""

    success: bool = True
    output: str
    result: list[dict[str, Any]]
    rejected: list[RejectedRecord] = Field(default_factory=list)
    stats: RunStats


class ErrorResponse(BaseModel):
    """Error payload shared by every failing endpoint."""

    success: bool = False
    error: str
    details: Optional[str] = None
