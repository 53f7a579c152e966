import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy import DateTime

def utcnow():
    return datetime.now(timezone.utc)

class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

USER_ROLES = ("Réclamation client", "Retour client", "site01", "site02", "performance", "admin", "consommateur")
TEAMS = ("A", "B", "C")
DESCRIPTION_TYPES = ("Physique", "Chimique", "Biologique", "Process")
CLAIM_ORIGINS = ("client", "site01", "site02", "consommateur")
REPORT_STATUSES = ("open", "in_progress", "resolved", "closed")
