"""
JobPost model for the positions a recruiter publishes.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class JobPost(Base):
    """
    A published position.

    ``description`` holds the resolved text shown to candidates (manual text,
    falling back to the AI draft); ``ai_generated_description`` keeps the
    original AI draft.
    """
    __tablename__ = "job_posts"

    id = Column(Integer, primary_key=True, index=True)
    recruiter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    ai_generated_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    recruiter = relationship("User", backref="job_posts")

    __table_args__ = (
        Index('idx_job_posts_recruiter_created', 'recruiter_id', 'created_at'),
    )

    def __repr__(self):
        return f"<JobPost(id={self.id}, recruiter_id={self.recruiter_id}, title='{self.title}')>"
