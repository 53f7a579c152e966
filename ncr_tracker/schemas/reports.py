import datetime as dt
import re
from decimal import Decimal
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints, field_validator

Team = Literal["A", "B", "C"]
DescriptionTypeName = Literal["Physique", "Chimique", "Biologique", "Process"]
ClaimOrigin = Literal["client", "site01", "site02", "consommateur"]
ReportStatus = Literal["open", "in_progress", "resolved", "closed"]

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?$")


class ReportFields(BaseModel):
    line_id: UUID
    product_id: UUID
    format_id: Optional[int] = None
    production_date: dt.date
    team: Team
    time: dt.time
    description_type: DescriptionTypeName
    description_details: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    quantity: int = Field(gt=0)
    claim_origin: ClaimOrigin
    claim_origin_detail: Optional[str] = None
    claim_origin_client_id: Optional[UUID] = None
    valuation: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    performance: Optional[str] = None

    @field_validator("claim_origin", mode="before")
    @classmethod
    def _lower_claim_origin(cls, value):
        # The desktop client historically sent "Consommateur" capitalised.
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("time", mode="before")
    @classmethod
    def _hours_minutes(cls, value):
        if isinstance(value, str):
            text = value.strip()
            match = _CLOCK_RE.fullmatch(text)
            if match:
                # Seconds are dropped; one-digit hours are accepted.
                return dt.time(int(match.group(1)), int(match.group(2)))
            return text
        return value


class ReportCreate(ReportFields):
    pass


class ReportUpdate(ReportFields):
    report_date: dt.date


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportPerformanceUpdate(BaseModel):
    performance: str


class ReportOut(BaseModel):
    id: UUID
    report_number: str
    report_date: dt.date
    line_id: UUID
    product_id: UUID
    format_id: Optional[int] = None
    production_date: dt.date
    team: str
    time: dt.time
    description_type: str
    description_details: str
    quantity: int
    claim_origin: str
    claim_origin_detail: Optional[str] = None
    claim_origin_client_id: Optional[UUID] = None
    valuation: float
    performance: Optional[str] = None
    status: str
    reported_by: UUID
    created_at: dt.datetime
    updated_at: dt.datetime
    line_name: Optional[str] = None
    product_name: Optional[str] = None
    format_display: Optional[str] = None
