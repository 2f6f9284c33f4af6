"""
AI Assistant Schemas

Request/response bodies for the assistant procedures. PrioritySuggestion
and DashboardInsights double as the JSON shapes the model must return.
"""
from pydantic import Field
from typing import List, Literal, Optional
from hrportal.schemas.base import CamelModel

TaskPriority = Literal["low", "medium", "high"]


class TaskPriorityRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class PrioritySuggestion(CamelModel):
    priority: TaskPriority


class TaskDescriptionRequest(CamelModel):
    project_id: int
    task_title: Optional[str] = None


class TaskDescriptionResponse(CamelModel):
    suggestion: str


class ReviewCommentRequest(CamelModel):
    time_entry_id: int
    review_type: Literal["approval", "rejection"]
    reason: Optional[str] = None


class ReviewCommentResponse(CamelModel):
    comment: str


class Insight(CamelModel):
    title: str = Field(..., description="Short title for the insight")
    description: str = Field(..., description="Detailed description of the insight (2-3 sentences)")
    type: Literal["positive", "suggestion", "warning"]


class DashboardInsights(CamelModel):
    insights: List[Insight]


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)
    conversation_history: Optional[List[ChatMessage]] = None


class ChatResponse(CamelModel):
    response: str
