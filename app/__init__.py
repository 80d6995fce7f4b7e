"""
Alumni Mentorship Platform
Meeting status tracking and approval for mentor/mentee programs.

Architecture:
- MongoDB: members (external), assignments, meeting schedules, meeting statuses
- FastAPI: HTTP API under /api
"""

__version__ = "1.0.0"
