"""
Project Management Models

Sprints and tasks inside a project, plus discussion comments on tasks.
"""
from sqlalchemy import Column, String, Text, Float, Date, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base


class Sprint(Base):
    __tablename__ = "sprints"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    goal = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), default="planned", nullable=False)  # planned, active, completed
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project")
    tasks = relationship("Task", back_populates="sprint")

    def __repr__(self):
        return f"<Sprint {self.name} project={self.project_id}>"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    sprint_id = Column(Integer, ForeignKey("sprints.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), default="todo", nullable=False)  # todo, in-progress, done
    priority = Column(String(20), default="medium", nullable=False)  # low, medium, high
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    estimated_hours = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project")
    sprint = relationship("Sprint", back_populates="tasks")
    assigned_to = relationship("User")
    comments = relationship("TaskComment", back_populates="task")

    def __repr__(self):
        return f"<Task {self.title} ({self.status})>"


class TaskComment(Base):
    __tablename__ = "task_comments"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")
    user = relationship("User")
