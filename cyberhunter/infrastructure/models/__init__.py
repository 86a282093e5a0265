"""ORM models used by the application infrastructure."""

from .chat import ChatMessageModel, MessageReactionModel, MessageReadModel
from .notification import NotificationModel
from .profile import EducationModel, ExperienceModel
from .project import (
    MilestoneModel,
    ProjectFreelancerModel,
    ProjectModel,
    ProjectSaveModel,
    ProposalModel,
)
from .task import TaskAssigneeModel, TaskModel, TaskTimeEntryModel
from .team import TeamInvitationModel, TeamMemberModel, TeamModel
from .user import UserModel

__all__ = [
    "ChatMessageModel",
    "EducationModel",
    "ExperienceModel",
    "MessageReactionModel",
    "MessageReadModel",
    "MilestoneModel",
    "NotificationModel",
    "ProjectFreelancerModel",
    "ProjectModel",
    "ProjectSaveModel",
    "ProposalModel",
    "TaskAssigneeModel",
    "TaskModel",
    "TaskTimeEntryModel",
    "TeamInvitationModel",
    "TeamMemberModel",
    "TeamModel",
    "UserModel",
]
