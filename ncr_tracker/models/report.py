import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from ncr_tracker.db.session import Base
from ncr_tracker.models.common import TimestampMixin, UUIDMixin


class NonConformityReport(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "non_conformity_reports"

    report_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    report_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    line_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("production_lines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    format_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("formats.id", ondelete="SET NULL"), nullable=True)
    production_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    team: Mapped[str] = mapped_column(String(1), nullable=False)  # A|B|C
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    description_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description_details: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    claim_origin: Mapped[str] = mapped_column(String(20), nullable=False)
    claim_origin_detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    claim_origin_client_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True
    )
    valuation: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    performance: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open", index=True)
    reported_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
