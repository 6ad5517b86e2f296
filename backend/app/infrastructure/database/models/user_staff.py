"""SQLAlchemy ORM model for back-office staff users."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base
from app.infrastructure.database.models.lifecycle import LifecycleMixin


class UserStaffModel(LifecycleMixin, Base):
    """ORM model — maps to the 'user_staff' table.

    ``role_name`` and ``city_name`` are denormalised copies of the referenced
    rows so the summary can group by readable labels.
    """

    __tablename__ = "user_staff"

    user_name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    cnic: Mapped[str | None] = mapped_column(String(15), nullable=True)
    mobile_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    role_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    city_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    login_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lock_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<UserStaffModel(id={self.id}, user_name='{self.user_name}')>"
