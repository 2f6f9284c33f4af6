"""
Document and Payslip Models

Files themselves live in object storage; rows keep the URL.
Only personal documents have an owner. Company, tax and policy
documents are visible to everyone.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    document_type = Column(String(20), nullable=False, index=True)  # personal, company, tax, policy
    name = Column(String(255), nullable=False)
    file_url = Column(String(500), nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User")

    def __repr__(self):
        return f"<Document {self.name} ({self.document_type})>"


class Payslip(Base):
    __tablename__ = "payslips"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    file_url = Column(String(500), nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_payslip_user_period', 'user_id', 'year', 'month'),
    )

    def __repr__(self):
        return f"<Payslip user={self.user_id} {self.year}-{self.month:02d}>"
