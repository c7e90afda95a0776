"""
Tests du passage en retard des échéances
"""
from datetime import date, datetime

from enums import PaymentStatus
from models import RentPayment
from services.rent_service import mark_overdue
import mark_overdue as mark_overdue_script


def statuses(db):
    db.expire_all()
    return {p.id: p.status for p in db.query(RentPayment)}


def test_only_past_pending_payments_flip(db, make, rental):
    late = make.payment(rental, due_date=date(2024, 2, 1))
    due_today = make.payment(rental, due_date=date(2024, 3, 1))
    paid = make.payment(rental, due_date=date(2024, 1, 1), status=PaymentStatus.PAID, paid_date=date(2024, 1, 1))

    count = mark_overdue(db, datetime(2024, 3, 1, 9, 30))

    assert count == 1
    assert statuses(db) == {
        late.id: PaymentStatus.OVERDUE,
        due_today.id: PaymentStatus.PENDING,
        paid.id: PaymentStatus.PAID,
    }


def test_second_run_changes_nothing(db, make, rental):
    make.payment(rental, due_date=date(2024, 2, 1))
    make.payment(rental, due_date=date(2024, 2, 15))

    assert mark_overdue(db, date(2024, 3, 1)) == 2
    assert mark_overdue(db, date(2024, 3, 1)) == 0


def test_command_line_entry_point(db, make, rental, capsys):
    payment = make.payment(rental, due_date=date(2024, 2, 1))

    assert mark_overdue_script.main(["--date", "2024-02-02"]) == 0

    assert "1 échéance(s)" in capsys.readouterr().out
    assert statuses(db)[payment.id] == PaymentStatus.OVERDUE
