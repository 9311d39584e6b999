"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import List, Literal, Optional

from forecast_gateway.domain.models import CashFlowEvent, ForecastResult


class CashFlowEventSchema(BaseModel):
    """Dated money movement as sent and returned over the wire"""

    model_config = ConfigDict(from_attributes=True)

    amount: float = Field(..., ge=0, description="Non-negative magnitude; sign comes from kind")
    date: str = Field(..., description="Calendar day, YYYY-MM-DD")
    kind: Literal["income", "expense"] = "expense"
    description: str = ""
    is_bill: bool = False
    event_id: Optional[str] = None
    category: Optional[str] = None

    def to_domain(self) -> CashFlowEvent:
        return CashFlowEvent(**self.model_dump())


class ForecastRequest(BaseModel):
    """Request body for POST /v1/forecast"""

    account_id: str = Field(..., min_length=1, description="Account identifier")
    horizon_days: int = Field(30, ge=0, le=366)
    daily_drift: float = Field(0.0, ge=0, description="Flat baseline spend per day")
    start_date: Optional[date] = None
    clamp_at_zero: bool = False
    taxonomy: Literal["full", "lite"] = "full"


class SimulateRequest(BaseModel):
    """Request body for POST /v1/forecast/simulate"""

    starting_balance: float
    events: List[CashFlowEventSchema] = Field(default_factory=list)
    horizon_days: int = Field(30, ge=0, le=366)
    daily_drift: float = Field(0.0, ge=0)
    start_date: Optional[date] = None
    clamp_at_zero: bool = False
    taxonomy: Literal["full", "lite"] = "full"


class ProjectionPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    balance: float


class RiskWindowSchema(BaseModel):
    """First-to-last negative day; serialized as from/to/min"""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    start: str = Field(..., alias="from")
    end: str = Field(..., alias="to")
    min_balance: float = Field(..., alias="min")


class CategoryRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    total: float
    count: int


class SummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: float
    inflows: float
    outflows: float
    end: float


class CoachTipSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    detail: str
    impact: str
    confidence: float
    action: Literal["apply-plan", "none"]


class ForecastResponse(BaseModel):
    """Response for POST /v1/forecast and /v1/forecast/simulate"""

    model_config = ConfigDict(from_attributes=True)

    account_id: Optional[str] = None
    projection: List[ProjectionPointSchema]
    categories: List[CategoryRowSchema]
    risk: Optional[RiskWindowSchema] = None
    summary: SummarySchema
    tips: List[CoachTipSchema]
    upcoming_bills: List[CashFlowEventSchema]
    outlook: str

    @classmethod
    def from_result(cls, result: ForecastResult, account_id: Optional[str] = None) -> "ForecastResponse":
        response = cls.model_validate(result)
        response.account_id = account_id
        return response


class AccountSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: str
    balance: Optional[float] = None
    customer_id: Optional[str] = None
    nickname: Optional[str] = None


class AccountsResponse(BaseModel):
    """Response for GET /v1/accounts"""

    customer_id: str
    accounts: List[AccountSchema]


class CategorizeRequest(BaseModel):
    """Request body for POST /v1/categorize"""

    texts: List[str] = Field(..., max_length=5000)
    taxonomy: Literal["full", "lite"] = "full"


class CategorizeResponse(BaseModel):
    labels: List[str]


class PlanRequest(BaseModel):
    """Request body for POST /v1/plan/apply"""

    bills: List[CashFlowEventSchema]


class BillActionRequest(BaseModel):
    """Request body for POST /v1/plan/delay and /v1/plan/split"""

    bills: List[CashFlowEventSchema]
    index: int = Field(..., ge=0, description="Position of the bill to act on")


class PlanResponse(BaseModel):
    """Updated bills plus the caller-held snapshot for undo"""

    bills: List[CashFlowEventSchema]
    previous_bills: List[CashFlowEventSchema]
    changed: bool
