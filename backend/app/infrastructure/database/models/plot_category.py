"""SQLAlchemy ORM model for plot categories (corner, park-facing, ...)."""

from sqlalchemy import Boolean, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base
from app.infrastructure.database.models.lifecycle import LifecycleMixin


class PlotCategoryModel(LifecycleMixin, Base):
    """ORM model — maps to the 'plot_categories' table."""

    __tablename__ = "plot_categories"

    category_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    category_desc: Mapped[str | None] = mapped_column(Text, nullable=True)
    surcharge_percentage: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    surcharge_fixed_amount: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<PlotCategoryModel(id={self.id}, name='{self.category_name}')>"
