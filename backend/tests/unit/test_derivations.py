"""Unit tests for computed record fields."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.domain.derivations import (
    aging_bucket,
    days_overdue_since,
    derive_defaulter,
    derive_installment,
    derive_plot_category,
    derive_user_staff,
    escalated_status,
    initials,
    payment_percentage,
    remaining_amount,
    safe_ratio,
)
from app.domain.entities import Record

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _record(module: str, **fields) -> Record:
    return Record(module=module, fields=fields, id="id-001")


def test_remaining_amount_rounds_to_cents():
    fields = {"amount_due": 1000.10, "late_fee_surcharge": 0.2, "amount_paid": 500.0, "discount_applied": 0.1}
    assert remaining_amount(fields) == 500.2


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"amount_due": 0, "amount_paid": 0}, 100),
        ({"amount_due": 1000, "amount_paid": 333}, 33),
        ({"amount_due": 1000, "amount_paid": 335}, 34),
        ({"amount_due": 1000, "amount_paid": 900, "discount_applied": 200}, 100),
    ],
)
def test_payment_percentage(fields, expected):
    assert payment_percentage(fields) == expected


def test_installment_overdue_only_when_unpaid_and_past_due():
    past_due = _record(
        "installments",
        status="pending",
        due_date=NOW - timedelta(days=1),
        amount_due=1000,
        amount_paid=0,
    )
    settled = _record(
        "installments",
        status="partially_paid",
        due_date=NOW - timedelta(days=1),
        amount_due=1000,
        amount_paid=1000,
    )
    not_yet_due = _record(
        "installments", status="pending", due_date=NOW + timedelta(days=1), amount_due=1000
    )

    assert derive_installment(past_due, NOW)["is_overdue"] is True
    assert derive_installment(settled, NOW)["is_overdue"] is False
    assert derive_installment(not_yet_due, NOW)["is_overdue"] is False


def test_naive_due_date_is_treated_as_utc():
    record = _record(
        "installments", status="pending", due_date=datetime(2024, 6, 1), amount_due=10
    )
    assert derive_installment(record, NOW)["is_overdue"] is True


def test_days_overdue_rounds_partial_days_up():
    assert days_overdue_since(NOW - timedelta(days=3, hours=1), NOW) == 4
    assert days_overdue_since(None, NOW) == 0
    assert days_overdue_since(date(2024, 6, 14), NOW) == 2


@pytest.mark.parametrize(
    "days,bucket",
    [(0, "0 days"), (29, "0 days"), (30, "30 days"), (95, "90 days"), (364, "180 days"), (365, "365+ days")],
)
def test_aging_bucket(days, bucket):
    assert aging_bucket(days) == bucket


@pytest.mark.parametrize(
    "days,notices,expected",
    [
        (10, 0, "Warning"),
        (10, 3, "Legal Action"),
        (45, 0, "Warning"),
        (120, 1, "Suspended"),
        (200, 0, "Legal Action"),
        (5, 0, "Resolved"),
    ],
)
def test_escalated_status(days, notices, expected):
    current = "Resolved" if days == 5 else "Warning"
    assert escalated_status(days, notices, current) == expected


def test_derive_defaulter_uses_last_payment_date():
    record = _record(
        "defaulters",
        last_payment_date=NOW - timedelta(days=100),
        days_overdue=10,
        notice_sent_count=1,
        status="Warning",
    )

    derived = derive_defaulter(record, NOW)

    assert derived == {
        "days_overdue_now": 100,
        "aging_bucket": "90 days",
        "escalated_status": "Suspended",
        "status_badge_color": "warning",
    }


def test_derive_plot_category():
    percentage = _record("plot_categories", surcharge_percentage=7.5, surcharge_fixed_amount=1000)
    fixed = _record("plot_categories", surcharge_percentage=0, surcharge_fixed_amount=1234)

    assert derive_plot_category(percentage) == {"surcharge_type": "percentage", "formatted_surcharge": "7.5%"}
    assert derive_plot_category(fixed)["formatted_surcharge"] == "PKR 1,234.00"


@pytest.mark.parametrize(
    "name,expected",
    [("Ali Raza Khan", "AR"), ("fatima", "FA"), ("Bilal  Ahmed", "BI"), ("", "")],
)
def test_initials(name, expected):
    assert initials(name) == expected


def test_user_staff_status_badge():
    locked = _record("user_staff", full_name="Sara Malik", is_active=True, lock_until=NOW + timedelta(minutes=5))
    inactive = _record("user_staff", full_name="Sara Malik", is_active=False)
    active = _record("user_staff", full_name="Sara Malik", is_active=True, lock_until=NOW - timedelta(hours=1))

    assert derive_user_staff(locked, NOW) == {"initials": "SM", "status_badge": "warning"}
    assert derive_user_staff(inactive, NOW)["status_badge"] == "danger"
    assert derive_user_staff(active, NOW)["status_badge"] == "success"


def test_safe_ratio():
    assert safe_ratio(5, 0) == 0
    assert safe_ratio(5, None) == 0
    assert safe_ratio(1, 4) == 0.25
