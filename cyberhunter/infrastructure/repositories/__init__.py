"""Repository implementations backed by SQLAlchemy sessions."""

from .chat_repository import ChatRepository
from .notification_repository import NotificationRepository
from .profile_repository import ProfileRepository
from .project_repository import ProjectRepository
from .task_repository import TaskRepository
from .team_repository import TeamRepository
from .user_repository import UserRepository

__all__ = [
    "ChatRepository",
    "NotificationRepository",
    "ProfileRepository",
    "ProjectRepository",
    "TaskRepository",
    "TeamRepository",
    "UserRepository",
]
