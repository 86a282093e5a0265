"""Domain entities for the marketplace."""

from .chat import (
    ATTACHMENT_MESSAGE_TYPES,
    CONVERSATION_DIRECT,
    CONVERSATION_PROJECT,
    CONVERSATION_TEAM,
    MESSAGE_TYPES,
    Attachment,
    ChatMessage,
    Conversation,
    DirectConversation,
    ProjectConversation,
    Reaction,
    TeamConversation,
    conversation_from_parts,
)
from .notification import (
    ACTION_METHODS,
    DISPATCH_FAILED,
    DISPATCH_PENDING,
    DISPATCH_SENT,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    Notification,
    NotificationAction,
)
from .profile import Education, Experience
from .project import (
    LOCKED_PROJECT_STATUSES,
    MILESTONE_STATUSES,
    PROJECT_CATEGORIES,
    PROJECT_DURATIONS,
    PROJECT_STATUSES,
    PROJECT_STATUS_CANCELLED,
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_DRAFT,
    PROJECT_STATUS_IN_PROGRESS,
    PROJECT_STATUS_OPEN,
    PROJECT_STATUS_REVIEW,
    PROJECT_VISIBILITIES,
    PROPOSAL_STATUS_ACCEPTED,
    PROPOSAL_STATUS_PENDING,
    PROPOSAL_STATUS_REJECTED,
    REVIEW_SIDE_CLIENT,
    REVIEW_SIDE_FREELANCER,
    Milestone,
    Project,
    Proposal,
)
from .role import SELF_REGISTRATION_ROLES, Role
from .task import (
    TASK_PRIORITIES,
    TASK_STATUSES,
    TASK_STATUS_DONE,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_IN_REVIEW,
    TASK_STATUS_NOT_STARTED,
    Task,
    TimeEntry,
)
from .team import (
    INVITATION_STATUS_ACCEPTED,
    INVITATION_STATUS_DECLINED,
    INVITATION_STATUS_PENDING,
    TEAM_ROLES,
    TEAM_ROLE_ADMIN,
    TEAM_ROLE_MEMBER,
    Team,
    TeamInvitation,
    TeamMember,
)
from .user import User

__all__ = [
    "ACTION_METHODS",
    "ATTACHMENT_MESSAGE_TYPES",
    "Attachment",
    "CONVERSATION_DIRECT",
    "CONVERSATION_PROJECT",
    "CONVERSATION_TEAM",
    "ChatMessage",
    "Conversation",
    "DISPATCH_FAILED",
    "DISPATCH_PENDING",
    "DISPATCH_SENT",
    "DirectConversation",
    "Education",
    "Experience",
    "INVITATION_STATUS_ACCEPTED",
    "INVITATION_STATUS_DECLINED",
    "INVITATION_STATUS_PENDING",
    "LOCKED_PROJECT_STATUSES",
    "MESSAGE_TYPES",
    "MILESTONE_STATUSES",
    "Milestone",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_TYPES",
    "Notification",
    "NotificationAction",
    "PROJECT_CATEGORIES",
    "PROJECT_DURATIONS",
    "PROJECT_STATUSES",
    "PROJECT_STATUS_CANCELLED",
    "PROJECT_STATUS_COMPLETED",
    "PROJECT_STATUS_DRAFT",
    "PROJECT_STATUS_IN_PROGRESS",
    "PROJECT_STATUS_OPEN",
    "PROJECT_STATUS_REVIEW",
    "PROJECT_VISIBILITIES",
    "PROPOSAL_STATUS_ACCEPTED",
    "PROPOSAL_STATUS_PENDING",
    "PROPOSAL_STATUS_REJECTED",
    "Project",
    "ProjectConversation",
    "Proposal",
    "REVIEW_SIDE_CLIENT",
    "REVIEW_SIDE_FREELANCER",
    "Reaction",
    "Role",
    "SELF_REGISTRATION_ROLES",
    "TASK_PRIORITIES",
    "TASK_STATUSES",
    "TASK_STATUS_DONE",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_IN_REVIEW",
    "TASK_STATUS_NOT_STARTED",
    "TEAM_ROLES",
    "TEAM_ROLE_ADMIN",
    "TEAM_ROLE_MEMBER",
    "Task",
    "Team",
    "TeamConversation",
    "TeamInvitation",
    "TeamMember",
    "TimeEntry",
    "User",
    "conversation_from_parts",
]
