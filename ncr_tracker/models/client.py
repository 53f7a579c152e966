from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ncr_tracker.db.session import Base
from ncr_tracker.models.common import TimestampMixin, UUIDMixin


class Client(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
