"""
Notification Model
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, Integer
from datetime import datetime
from hrportal.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        # Unread badge count
        Index('idx_notification_user_read', 'user_id', 'is_read'),
    )

    def __repr__(self):
        return f"<Notification {self.id} user={self.user_id} read={self.is_read}>"
