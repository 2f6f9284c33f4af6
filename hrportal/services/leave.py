"""
Leave Accounting

Day counting and yearly balance bookkeeping shared by employee,
approval and admin endpoints.
"""
from datetime import date
from typing import List
from sqlalchemy.orm import Session
from hrportal.models.leave import LeaveBalance, LeaveType


def leave_days(start_date: date, end_date: date, is_half_day: bool = False) -> float:
    """
    Number of leave days a request consumes.

    Calendar days, inclusive of both ends. Weekends and holidays are
    not excluded. A half-day request always counts as 0.5.
    """
    if is_half_day:
        return 0.5
    return float((end_date - start_date).days + 1)


def create_leave_balances(db: Session, user_id: int, year: int) -> List[LeaveBalance]:
    """
    Allocate a balance for every leave type for the given year.

    Types the user already has a balance for are skipped, so this is
    safe to call again after new leave types are added. Caller commits.
    """
    existing = {
        b.leave_type_id
        for b in db.query(LeaveBalance).filter(
            LeaveBalance.user_id == user_id,
            LeaveBalance.year == year,
        )
    }

    balances = []
    for leave_type in db.query(LeaveType).order_by(LeaveType.name).all():
        if leave_type.id in existing:
            continue
        balance = LeaveBalance(
            user_id=user_id,
            year=year,
            leave_type_id=leave_type.id,
            allocated=leave_type.default_allocated,
            used=0,
            balance=leave_type.default_allocated,
        )
        db.add(balance)
        balances.append(balance)

    db.flush()
    return balances


def get_balance(db: Session, user_id: int, leave_type_id: int, year: int) -> LeaveBalance:
    return db.query(LeaveBalance).filter(
        LeaveBalance.user_id == user_id,
        LeaveBalance.leave_type_id == leave_type_id,
        LeaveBalance.year == year,
    ).first()


def debit_balance(balance: LeaveBalance, days: float) -> None:
    balance.used = balance.used + days
    balance.balance = balance.balance - days
