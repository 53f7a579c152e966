from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ncr_tracker.db.session import Base
from ncr_tracker.models.common import TimestampMixin, UUIDMixin


class ProductionLine(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "production_lines"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
