"""
Pydantic schemas for job post endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from app.services.job_post_service import JobDraft


class JobPostBase(BaseModel):
    """Fields a recruiter edits. Emptiness rules are enforced by the save service."""
    title: str = Field("", description="Job title", max_length=255)
    description: str = Field("", description="Manual job description")
    ai_generated_description: str = Field("", description="AI drafted job description")

    def to_draft(self) -> JobDraft:
        return JobDraft(
            title=self.title,
            description=self.description,
            ai_generated_description=self.ai_generated_description,
        )


class JobPostCreate(JobPostBase):
    """Schema for publishing a new position."""
    pass


class JobPostUpdate(JobPostBase):
    """Schema for updating a position. The full draft is sent every time."""
    pass


class JobPostResponse(BaseModel):
    """Schema for job post response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    recruiter_id: int
    title: str
    description: str
    ai_generated_description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class JobPostListResponse(BaseModel):
    job_posts: list[JobPostResponse]
    total: int
    job_limit: Optional[int] = Field(None, description="Plan quota, null for unlimited")


class AIDescriptionRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = Field(None, description="Skills, seniority, location or any other hints")
    current_description: Optional[str] = None


class AIDescriptionResponse(BaseModel):
    ai_generated_description: str
