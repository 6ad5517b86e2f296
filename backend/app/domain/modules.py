"""Module configurations — how each back-office module is searched, filtered,
sorted, and summarised.

Adding a module means adding a ``ModuleConfig`` here and an ORM model mapped
to the same name in the infrastructure layer.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from app.domain.derivations import (
    derive_defaulter,
    derive_installment,
    derive_plot_category,
    derive_user_staff,
    remaining_amount,
    safe_ratio,
)
from app.domain.entities import (
    Aggregate,
    AggregateOp,
    Condition,
    FilterKind,
    FilterSpec,
    GroupSpec,
    ModuleConfig,
    Operator,
    SortOrder,
    SortSpec,
    ValueType,
)
from app.domain.exceptions import EntityNotFoundError, InvalidArgumentError

DEFAULTER_STATUSES = ("Warning", "Suspended", "Legal Action", "Resolved")
INSTALLMENT_STATUSES = ("pending", "partially_paid", "paid", "overdue", "cancelled")
INSTALLMENT_TYPES = ("Monthly", "Quarterly")

RECENT_WINDOW = timedelta(days=30)


def _count(alias: str = "count", where: Condition | None = None) -> Aggregate:
    return Aggregate(op=AggregateOp.COUNT, alias=alias, where=where)


def _sum(field: str, alias: str | None = None) -> Aggregate:
    return Aggregate(op=AggregateOp.SUM, alias=alias or f"sum_{field}", field=field)


def _avg(field: str, alias: str | None = None) -> Aggregate:
    return Aggregate(op=AggregateOp.AVG, alias=alias or f"avg_{field}", field=field)


def _reference(field: str) -> FilterSpec:
    return FilterSpec(field=field, kind=FilterKind.REFERENCE)


def _date_range(field: str, bound: Operator) -> FilterSpec:
    return FilterSpec(field=field, kind=FilterKind.RANGE, value_type=ValueType.DATE, bound=bound)


# ── Applications ─────────────────────────────────────────────────────


def _application_summary() -> tuple[GroupSpec, ...]:
    since = datetime.now(timezone.utc) - RECENT_WINDOW
    return (
        GroupSpec(
            name="totals",
            aggregates=(
                _count("total"),
                _count("recent", where=Condition("created_at", Operator.GTE, since)),
            ),
        ),
        GroupSpec(name="by_type", aggregates=(_count(),), group_by="application_type_id"),
    )


def _finalize_applications(raw: dict[str, Any]) -> dict[str, Any]:
    totals = raw["totals"]
    return {
        "total_applications": totals["total"],
        "recent_applications": totals["recent"],
        "by_type": raw["by_type"],
    }


APPLICATIONS = ModuleConfig(
    name="applications",
    entity_label="Application",
    fields=frozenset({
        "application_no",
        "application_type_id",
        "member_id",
        "plot_id",
        "application_date",
        "status_id",
        "remarks",
        "attachment_path",
    }),
    searchable_fields=("application_no", "remarks"),
    filterable_fields={
        "application_type_id": _reference("application_type_id"),
        "member_id": _reference("member_id"),
        "plot_id": _reference("plot_id"),
        "status_id": _reference("status_id"),
        "start_date": _date_range("created_at", Operator.GTE),
        "end_date": _date_range("created_at", Operator.LTE),
        "application_date_from": _date_range("application_date", Operator.GTE),
        "application_date_to": _date_range("application_date", Operator.LTE),
    },
    sortable_fields=frozenset({"application_no", "application_date", "created_at", "updated_at"}),
    default_sort=SortSpec("created_at", SortOrder.DESC),
    default_limit=10,
    summary=_application_summary,
    reference_fields=frozenset({"application_type_id", "member_id", "plot_id", "status_id"}),
    finalize=_finalize_applications,
)


# ── Plot categories ──────────────────────────────────────────────────

_NO_SURCHARGE = (
    Condition("surcharge_percentage", Operator.EQ, 0),
    Condition("surcharge_fixed_amount", Operator.EQ, 0),
)


def _surcharge(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _validate_plot_category(fields: dict[str, Any]) -> None:
    percentage = _surcharge(fields.get("surcharge_percentage"))
    fixed = _surcharge(fields.get("surcharge_fixed_amount"))
    if percentage > 0 and fixed > 0:
        raise InvalidArgumentError(
            "surcharge_fixed_amount", "cannot have both percentage and fixed amount surcharge"
        )


def _finalize_plot_categories(raw: dict[str, Any]) -> dict[str, Any]:
    totals = raw["totals"]
    total = totals["total"]
    return {
        "total": total,
        "active_count": totals["active"],
        "inactive_count": total - totals["active"],
        "percentage_surcharge_count": totals["percentage"],
        "fixed_surcharge_count": totals["fixed"],
        "no_surcharge_count": totals["none"],
        "avg_percentage_surcharge": totals["avg_percentage"],
        "avg_fixed_surcharge": totals["avg_fixed"],
    }


PLOT_CATEGORIES = ModuleConfig(
    name="plot_categories",
    entity_label="PlotCategory",
    fields=frozenset({
        "category_name",
        "category_desc",
        "surcharge_percentage",
        "surcharge_fixed_amount",
        "is_active",
    }),
    searchable_fields=("category_name", "category_desc"),
    filterable_fields={
        "is_active": FilterSpec(field="is_active", kind=FilterKind.EXACT, value_type=ValueType.BOOL),
        "surcharge_type": FilterSpec(
            field="surcharge_percentage",
            kind=FilterKind.PRESET,
            presets={
                "percentage": (
                    Condition("surcharge_percentage", Operator.GT, 0),
                    Condition("surcharge_fixed_amount", Operator.EQ, 0),
                ),
                "fixed": (
                    Condition("surcharge_fixed_amount", Operator.GT, 0),
                    Condition("surcharge_percentage", Operator.EQ, 0),
                ),
                "none": _NO_SURCHARGE,
            },
        ),
    },
    sortable_fields=frozenset({
        "category_name",
        "surcharge_percentage",
        "surcharge_fixed_amount",
        "created_at",
    }),
    default_sort=SortSpec("category_name", SortOrder.ASC),
    default_limit=10,
    summary=(
        GroupSpec(
            name="totals",
            aggregates=(
                _count("total"),
                _count("active", where=Condition("is_active", Operator.EQ, True)),
                _count("percentage", where=Condition("surcharge_percentage", Operator.GT, 0)),
                _count("fixed", where=Condition("surcharge_fixed_amount", Operator.GT, 0)),
                _count("none", where=_NO_SURCHARGE),
                _avg("surcharge_percentage", "avg_percentage"),
                _avg("surcharge_fixed_amount", "avg_fixed"),
            ),
        ),
    ),
    finalize=_finalize_plot_categories,
    derive=derive_plot_category,
    validate=_validate_plot_category,
)


# ── Defaulters ───────────────────────────────────────────────────────


def _finalize_defaulters(raw: dict[str, Any]) -> dict[str, Any]:
    totals = raw["totals"]
    return {
        "total_defaulters": totals["count"],
        "total_overdue_amount": totals["amount"],
        "average_overdue_amount": totals["avg_amount"],
        "average_days_overdue": totals["avg_days"],
        "by_status": raw["by_status"],
        "by_notice_count": {
            f"{notices} notices": count for notices, count in raw["by_notice_count"].items()
        },
    }


DEFAULTERS = ModuleConfig(
    name="defaulters",
    entity_label="Defaulter",
    fields=frozenset({
        "member_id",
        "plot_id",
        "file_id",
        "total_overdue_amount",
        "last_payment_date",
        "days_overdue",
        "notice_sent_count",
        "status",
        "remarks",
        "resolved_at",
    }),
    searchable_fields=("remarks",),
    filterable_fields={
        "member_id": _reference("member_id"),
        "plot_id": _reference("plot_id"),
        "file_id": _reference("file_id"),
        "status": FilterSpec(field="status", kind=FilterKind.ENUM_SET, choices=DEFAULTER_STATUSES),
        "min_amount": FilterSpec(
            field="total_overdue_amount",
            kind=FilterKind.RANGE,
            value_type=ValueType.FLOAT,
            bound=Operator.GTE,
        ),
        "max_amount": FilterSpec(
            field="total_overdue_amount",
            kind=FilterKind.RANGE,
            value_type=ValueType.FLOAT,
            bound=Operator.LTE,
        ),
        "min_days": FilterSpec(
            field="days_overdue", kind=FilterKind.RANGE, value_type=ValueType.INT, bound=Operator.GTE
        ),
        "max_days": FilterSpec(
            field="days_overdue", kind=FilterKind.RANGE, value_type=ValueType.INT, bound=Operator.LTE
        ),
    },
    sortable_fields=frozenset({
        "days_overdue",
        "total_overdue_amount",
        "notice_sent_count",
        "created_at",
    }),
    default_sort=SortSpec("days_overdue", SortOrder.DESC),
    default_limit=20,
    summary=(
        GroupSpec(
            name="totals",
            aggregates=(
                _count(),
                _sum("total_overdue_amount", "amount"),
                _avg("total_overdue_amount", "avg_amount"),
                _avg("days_overdue", "avg_days"),
            ),
        ),
        GroupSpec(
            name="by_status",
            group_by="status",
            aggregates=(
                _count(),
                _sum("total_overdue_amount", "total_amount"),
                _avg("days_overdue", "avg_days"),
            ),
        ),
        GroupSpec(name="by_notice_count", group_by="notice_sent_count", aggregates=(_count(),)),
    ),
    reference_fields=frozenset({"member_id", "plot_id", "file_id"}),
    finalize=_finalize_defaulters,
    derive=derive_defaulter,
)


# ── Installments ─────────────────────────────────────────────────────

_INSTALLMENT_AMOUNTS = ("amount_due", "amount_paid", "late_fee_surcharge", "discount_applied")


def _finalize_installments(raw: dict[str, Any]) -> dict[str, Any]:
    totals = raw["totals"]
    by_status = raw["by_status"]

    def outstanding(statuses: tuple[str, ...]) -> float:
        return round(
            sum(remaining_amount(by_status[s]) for s in statuses if s in by_status), 2
        )

    return {
        "total_installments": totals["count"],
        "total_amount_due": totals["amount_due"],
        "total_amount_paid": totals["amount_paid"],
        "total_late_fees": totals["late_fee_surcharge"],
        "total_discounts": totals["discount_applied"],
        "pending_amount": outstanding(("pending", "partially_paid")),
        "overdue_amount": outstanding(("overdue",)),
        "collection_rate": round(
            safe_ratio(totals["amount_paid"], totals["amount_due"]) * 100, 2
        ),
        "by_status": {status: row["count"] for status, row in by_status.items()},
    }


INSTALLMENTS = ModuleConfig(
    name="installments",
    entity_label="Installment",
    fields=frozenset({
        "member_id",
        "plot_id",
        "installment_no",
        "installment_type",
        "due_date",
        "amount_due",
        "amount_paid",
        "late_fee_surcharge",
        "discount_applied",
        "paid_date",
        "payment_mode_id",
        "status",
        "installment_remarks",
    }),
    searchable_fields=("installment_remarks",),
    filterable_fields={
        "member_id": _reference("member_id"),
        "plot_id": _reference("plot_id"),
        "payment_mode_id": _reference("payment_mode_id"),
        "status": FilterSpec(field="status", kind=FilterKind.ENUM_SET, choices=INSTALLMENT_STATUSES),
        "installment_type": FilterSpec(
            field="installment_type", kind=FilterKind.ENUM_SET, choices=INSTALLMENT_TYPES
        ),
        "start_date": _date_range("created_at", Operator.GTE),
        "end_date": _date_range("created_at", Operator.LTE),
        "due_date_start": _date_range("due_date", Operator.GTE),
        "due_date_end": _date_range("due_date", Operator.LTE),
    },
    sortable_fields=frozenset({
        "due_date",
        "installment_no",
        "amount_due",
        "amount_paid",
        "created_at",
    }),
    default_sort=SortSpec("due_date", SortOrder.ASC),
    default_limit=10,
    summary=(
        GroupSpec(
            name="totals",
            aggregates=(_count(),) + tuple(_sum(f, f) for f in _INSTALLMENT_AMOUNTS),
        ),
        GroupSpec(
            name="by_status",
            group_by="status",
            aggregates=(_count(),) + tuple(_sum(f, f) for f in _INSTALLMENT_AMOUNTS),
        ),
    ),
    reference_fields=frozenset({"member_id", "plot_id", "payment_mode_id"}),
    finalize=_finalize_installments,
    derive=derive_installment,
)


# ── User staff ───────────────────────────────────────────────────────


def _finalize_user_staff(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "total_users": raw["totals"]["total"],
        "active_users": raw["totals"]["active"],
        "by_role": raw["by_role"],
        "by_city": raw["by_city"],
        "by_designation": raw["by_designation"],
    }


USER_STAFF = ModuleConfig(
    name="user_staff",
    entity_label="UserStaff",
    fields=frozenset({
        "user_name",
        "full_name",
        "cnic",
        "mobile_no",
        "email",
        "role_id",
        "role_name",
        "city_id",
        "city_name",
        "designation",
        "is_active",
        "last_login",
        "login_attempts",
        "lock_until",
    }),
    searchable_fields=("user_name", "full_name", "email", "designation", "cnic", "mobile_no"),
    filterable_fields={
        "role_id": _reference("role_id"),
        "city_id": _reference("city_id"),
        "designation": FilterSpec(field="designation", kind=FilterKind.CONTAINS),
        "is_active": FilterSpec(field="is_active", kind=FilterKind.EXACT, value_type=ValueType.BOOL),
    },
    sortable_fields=frozenset({"user_name", "full_name", "created_at", "last_login"}),
    default_sort=SortSpec("created_at", SortOrder.DESC),
    default_limit=20,
    summary=(
        GroupSpec(
            name="totals",
            aggregates=(
                _count("total"),
                _count("active", where=Condition("is_active", Operator.EQ, True)),
            ),
        ),
        GroupSpec(name="by_role", group_by="role_name", aggregates=(_count(),)),
        GroupSpec(name="by_city", group_by="city_name", aggregates=(_count(),)),
        GroupSpec(
            name="by_designation",
            group_by="designation",
            aggregates=(_count(),),
            missing_label="Not Specified",
        ),
    ),
    reference_fields=frozenset({"role_id", "city_id"}),
    finalize=_finalize_user_staff,
    derive=derive_user_staff,
)


MODULES: dict[str, ModuleConfig] = {
    config.name: config
    for config in (APPLICATIONS, PLOT_CATEGORIES, DEFAULTERS, INSTALLMENTS, USER_STAFF)
}


def get_module(name: str) -> ModuleConfig:
    """Look up a module configuration by its URL name."""
    try:
        return MODULES[name]
    except KeyError:
        raise EntityNotFoundError("Module", name) from None
