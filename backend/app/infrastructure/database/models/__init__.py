from .lifecycle import LifecycleMixin
from .application import ApplicationModel
from .plot_category import PlotCategoryModel
from .defaulter import DefaulterModel
from .installment import InstallmentModel
from .user_staff import UserStaffModel

# Module name → ORM model holding its records.
MODELS: dict[str, type[LifecycleMixin]] = {
    "applications": ApplicationModel,
    "plot_categories": PlotCategoryModel,
    "defaulters": DefaulterModel,
    "installments": InstallmentModel,
    "user_staff": UserStaffModel,
}

__all__ = [
    "LifecycleMixin",
    "ApplicationModel",
    "PlotCategoryModel",
    "DefaulterModel",
    "InstallmentModel",
    "UserStaffModel",
    "MODELS",
]
