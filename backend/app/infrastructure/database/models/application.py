"""SQLAlchemy ORM model for membership/plot applications."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base
from app.infrastructure.database.models.lifecycle import LifecycleMixin


class ApplicationModel(LifecycleMixin, Base):
    """ORM model — maps to the 'applications' table."""

    __tablename__ = "applications"

    application_no: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    application_type_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    member_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    plot_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    application_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachment_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<ApplicationModel(id={self.id}, no='{self.application_no}')>"
