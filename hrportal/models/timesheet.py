"""
Time Entry Model

Lifecycle: draft -> submitted -> approved | rejected.
Rejected entries can be edited and resubmitted.
"""
from sqlalchemy import Column, String, Text, Boolean, Float, Date, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    # Optional link to a tracked task; `task` keeps the free-text label either way
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    task = Column(String(255), nullable=False)
    hours = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    is_billable = Column(Boolean, default=True, nullable=False)

    status = Column(String(20), default="draft", nullable=False, index=True)  # draft, submitted, approved, rejected
    submitted_at = Column(DateTime, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    project = relationship("Project")
    linked_task = relationship("Task", foreign_keys=[task_id])

    __table_args__ = (
        # Own entries by date range
        Index('idx_time_entry_user_date', 'user_id', 'date'),
        # Approval queue and reporting
        Index('idx_time_entry_status_date', 'status', 'date'),
    )

    def __repr__(self):
        return f"<TimeEntry {self.id} user={self.user_id} {self.date} {self.hours}h>"
