from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ncr_tracker.db.session import Base
from ncr_tracker.models.common import TimestampMixin, UUIDMixin


class Product(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "products"

    designation: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
