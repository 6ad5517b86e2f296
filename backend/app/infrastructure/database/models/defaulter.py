"""SQLAlchemy ORM model for payment defaulters."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base
from app.infrastructure.database.models.lifecycle import LifecycleMixin


class DefaulterModel(LifecycleMixin, Base):
    """ORM model — maps to the 'defaulters' table."""

    __tablename__ = "defaulters"

    member_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    plot_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    file_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    total_overdue_amount: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    last_payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    days_overdue: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    notice_sent_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="Warning", nullable=False, index=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<DefaulterModel(id={self.id}, member={self.member_id}, status='{self.status}')>"
