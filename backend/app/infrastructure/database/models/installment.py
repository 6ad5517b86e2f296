"""SQLAlchemy ORM model for plot installments."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base
from app.infrastructure.database.models.lifecycle import LifecycleMixin


class InstallmentModel(LifecycleMixin, Base):
    """ORM model — maps to the 'installments' table."""

    __tablename__ = "installments"

    member_id: Mapped[str] = mapped_column(String(36), nullable=False)
    plot_id: Mapped[str] = mapped_column(String(36), nullable=False)
    installment_no: Mapped[int] = mapped_column(Integer, nullable=False)
    installment_type: Mapped[str] = mapped_column(String(20), default="Monthly", nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    amount_due: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    amount_paid: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    late_fee_surcharge: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    discount_applied: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_mode_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False, index=True)
    installment_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_installments_member_plot", "member_id", "plot_id"),
        Index("ix_installments_due", "due_date", "status"),
    )

    def __repr__(self) -> str:
        return f"<InstallmentModel(id={self.id}, no={self.installment_no}, status='{self.status}')>"
