"""
Leave Models

LeaveType: configurable kinds of leave with a default yearly allocation
LeaveBalance: per user, per year, per type; balance = allocated - used
LeaveRequest: pending -> approved | rejected | cancelled
Holiday: company holidays, shown on the dashboard and leave calendar
"""
from sqlalchemy import Column, String, Text, Boolean, Float, Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    is_paid = Column(Boolean, default=True, nullable=False)
    requires_approval = Column(Boolean, default=True, nullable=False)
    requires_attachment = Column(Boolean, default=False, nullable=False)
    default_allocated = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<LeaveType {self.name}>"


class LeaveBalance(Base):
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False)
    allocated = Column(Float, default=0, nullable=False)
    used = Column(Float, default=0, nullable=False)
    balance = Column(Float, default=0, nullable=False)

    leave_type = relationship("LeaveType")

    __table_args__ = (
        UniqueConstraint('user_id', 'year', 'leave_type_id', name='uq_leave_balance_user_year_type'),
    )

    def __repr__(self):
        return f"<LeaveBalance user={self.user_id} {self.year} type={self.leave_type_id} {self.balance}>"


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_half_day = Column(Boolean, default=False, nullable=False)
    half_day_period = Column(String(2), nullable=True)  # AM, PM
    reason = Column(Text, nullable=False)
    attachment_url = Column(String(500), nullable=True)
    backup_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, approved, rejected, cancelled
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    backup_user = relationship("User", foreign_keys=[backup_user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    leave_type = relationship("LeaveType")

    def __repr__(self):
        return f"<LeaveRequest {self.id} user={self.user_id} {self.start_date}..{self.end_date} {self.status}>"


class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    is_optional = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Holiday {self.name} {self.date}>"
