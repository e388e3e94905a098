"""
Recruiting data model: recruiters, their subscription and their job posts.

Importing this package registers every table on ``Base.metadata``.
"""
from app.db.models.user import User
from app.db.models.subscription import Subscription
from app.db.models.job_post import JobPost

__all__ = ["User", "Subscription", "JobPost"]
