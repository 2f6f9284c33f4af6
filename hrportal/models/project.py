"""
Project Model

Client projects that employees log time against. An employee can only
log time on projects they are assigned to through ProjectAssignment.
"""
from sqlalchemy import Column, String, Text, Float, Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)

    name = Column(String(255), nullable=False, index=True)
    client = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    budget_hours = Column(Float, nullable=True)
    status = Column(
        String(20),
        default="active",
        nullable=False,
        index=True
    )  # active, completed, on-hold

    # Customer contact and contract details
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    sow_file_url = Column(String(500), nullable=True)
    aws_account_number = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignments = relationship("ProjectAssignment", back_populates="project")

    def __repr__(self):
        return f"<Project {self.name}>"


class ProjectAssignment(Base):
    __tablename__ = "project_assignments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    role = Column(String(100), nullable=True)
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User")
    project = relationship("Project", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint('user_id', 'project_id', name='uq_assignment_user_project'),
    )

    def __repr__(self):
        return f"<ProjectAssignment user={self.user_id} project={self.project_id}>"
