"""Computed (virtual) record fields — pure functions applied after retrieval.

Nothing here is stored or filtered on; the query engine attaches the results
to each listed record under ``derived``.
"""

import math
from datetime import date, datetime, timezone
from typing import Any

from app.domain.entities import Record

# Defaulter aging boundaries in days; anything at or past the last one is "365+".
AGING_BOUNDARIES = (0, 30, 60, 90, 180, 365)

_DAY_SECONDS = 60 * 60 * 24


def as_utc(value: datetime | date | None) -> datetime | None:
    """Normalise dates and naive datetimes (as returned by SQLite) to aware UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _round2(value: float) -> float:
    return round(value, 2)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ── Installments ─────────────────────────────────────────────────────


def remaining_amount(fields: dict[str, Any]) -> float:
    """Amount still owed: due + late fee − paid − discount, to 2 dp."""
    return _round2(
        (fields.get("amount_due") or 0)
        + (fields.get("late_fee_surcharge") or 0)
        - (fields.get("amount_paid") or 0)
        - (fields.get("discount_applied") or 0)
    )


def installment_is_overdue(fields: dict[str, Any], now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    due_date = as_utc(fields.get("due_date"))
    return (
        fields.get("status") in ("pending", "partially_paid")
        and due_date is not None
        and due_date < now
        and remaining_amount(fields) > 0
    )


def payment_percentage(fields: dict[str, Any]) -> int:
    amount_due = fields.get("amount_due") or 0
    if amount_due <= 0:
        return 100
    paid = (fields.get("amount_paid") or 0) + (fields.get("discount_applied") or 0)
    return min(100, _round_half_up(paid / amount_due * 100))


def derive_installment(record: Record, now: datetime | None = None) -> dict[str, Any]:
    return {
        "remaining_amount": remaining_amount(record.fields),
        "is_overdue": installment_is_overdue(record.fields, now),
        "payment_percentage": payment_percentage(record.fields),
    }


# ── Defaulters ───────────────────────────────────────────────────────


def days_overdue_since(last_payment_date: datetime | date | None, now: datetime | None = None) -> int:
    """Whole days (rounded up) since the last payment; 0 when there is none."""
    last_paid = as_utc(last_payment_date)
    if last_paid is None:
        return 0
    now = now or datetime.now(timezone.utc)
    elapsed = abs((now - last_paid).total_seconds())
    return math.ceil(elapsed / _DAY_SECONDS)


def aging_bucket(days_overdue: int) -> str:
    """Label of the aging range ``days_overdue`` falls in, e.g. ``"30 days"``."""
    days = max(0, days_overdue)
    if days >= AGING_BOUNDARIES[-1]:
        return f"{AGING_BOUNDARIES[-1]}+ days"
    lower = AGING_BOUNDARIES[0]
    for boundary in AGING_BOUNDARIES:
        if days < boundary:
            break
        lower = boundary
    return f"{lower} days"


def escalated_status(days_overdue: int, notice_sent_count: int, current: str) -> str:
    if days_overdue >= 180 or notice_sent_count >= 3:
        return "Legal Action"
    if days_overdue >= 90:
        return "Suspended"
    if days_overdue >= 30:
        return "Warning"
    return current


_DEFAULTER_BADGES = {
    "Warning": "warning",
    "Suspended": "danger",
    "Legal Action": "dark",
    "Resolved": "success",
}


def derive_defaulter(record: Record, now: datetime | None = None) -> dict[str, Any]:
    fields = record.fields
    last_payment = fields.get("last_payment_date")
    days = days_overdue_since(last_payment, now) if last_payment else fields.get("days_overdue") or 0
    status = fields.get("status") or "Warning"
    return {
        "days_overdue_now": days,
        "aging_bucket": aging_bucket(days),
        "escalated_status": escalated_status(days, fields.get("notice_sent_count") or 0, status),
        "status_badge_color": _DEFAULTER_BADGES.get(status, "secondary"),
    }


# ── Plot categories ──────────────────────────────────────────────────


def surcharge_type(fields: dict[str, Any]) -> str:
    if (fields.get("surcharge_percentage") or 0) > 0:
        return "percentage"
    if (fields.get("surcharge_fixed_amount") or 0) > 0:
        return "fixed"
    return "none"


def format_surcharge(kind: str, value: float) -> str:
    if kind == "percentage":
        return f"{value:g}%"
    return f"PKR {value:,.2f}"


def price_with_surcharge(fields: dict[str, Any], base_price: float) -> dict[str, Any]:
    """Final price of a plot in a category; a percentage surcharge wins over a fixed one."""
    kind = surcharge_type(fields)
    if kind == "percentage":
        value = fields["surcharge_percentage"]
        surcharge = base_price * value / 100
    elif kind == "fixed":
        value = fields["surcharge_fixed_amount"]
        surcharge = value
    else:
        value = 0
        surcharge = 0
    return {
        "type": kind,
        "value": value,
        "formatted_value": format_surcharge(kind, value),
        "surcharge_amount": _round2(surcharge),
        "final_price": _round2(base_price + surcharge),
    }


def derive_plot_category(record: Record) -> dict[str, Any]:
    kind = surcharge_type(record.fields)
    value = {
        "percentage": record.fields.get("surcharge_percentage") or 0,
        "fixed": record.fields.get("surcharge_fixed_amount") or 0,
    }.get(kind, 0)
    return {"surcharge_type": kind, "formatted_surcharge": format_surcharge(kind, value)}


# ── User staff ───────────────────────────────────────────────────────


def initials(full_name: str) -> str:
    names = full_name.split(" ")
    if len(names) >= 2 and names[0] and names[1]:
        return (names[0][0] + names[1][0]).upper()
    return full_name[:2].upper()


def derive_user_staff(record: Record, now: datetime | None = None) -> dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    fields = record.fields
    lock_until = as_utc(fields.get("lock_until"))
    if not fields.get("is_active", True):
        badge = "danger"
    elif lock_until is not None and lock_until > now:
        badge = "warning"
    else:
        badge = "success"
    return {"initials": initials(fields.get("full_name") or ""), "status_badge": badge}


# ── Summaries ────────────────────────────────────────────────────────


def safe_ratio(numerator: float | None, denominator: float | None) -> float:
    """``numerator / denominator``, or 0 when the denominator is zero or missing."""
    if not denominator:
        return 0
    return (numerator or 0) / denominator
