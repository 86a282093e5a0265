from .chat import (
    ConversationRead,
    MarkReadRequest,
    MessageCreate,
    MessageRead,
    ReactionRead,
    ReactionRequest,
    UnreadCountsRead,
)
from .common import MessageResponse, PageEnvelope, page_envelope
from .notification import (
    NotificationRead,
    NotificationSend,
    SystemNotificationCreate,
    UserNotificationCreate,
)
from .project import (
    MilestoneCreate,
    MilestoneRead,
    MilestoneUpdate,
    ProjectCreate,
    ProjectDetailRead,
    ProjectRead,
    ProjectUpdate,
    ProjectUpdatePost,
    ProposalCreate,
    ProposalRead,
    ProposalStatusUpdate,
    ReviewCreate,
)
from .task import (
    AssignRequest,
    CommentCreate,
    DependencyCreate,
    ProgressUpdate,
    SubtaskCreate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
    TimeEntryRead,
    TimeTrackingRequest,
)
from .team import (
    InvitationRead,
    InviteRequest,
    MemberUpdate,
    OwnershipTransfer,
    TeamCreate,
    TeamRead,
    TeamUpdate,
)
from .user import (
    AdminUserUpdate,
    EducationCreate,
    EducationRead,
    ExperienceCreate,
    ExperienceRead,
    ForgotPasswordRequest,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdate,
    PublicUserRead,
    RegisterRequest,
    ResetPasswordRequest,
    SkillsUpdate,
    Token,
    UserRead,
    UserStatsRead,
)

__all__ = [
    "AdminUserUpdate",
    "AssignRequest",
    "CommentCreate",
    "ConversationRead",
    "DependencyCreate",
    "EducationCreate",
    "EducationRead",
    "ExperienceCreate",
    "ExperienceRead",
    "ForgotPasswordRequest",
    "InvitationRead",
    "InviteRequest",
    "LoginRequest",
    "MarkReadRequest",
    "MemberUpdate",
    "MessageCreate",
    "MessageRead",
    "MessageResponse",
    "MilestoneCreate",
    "MilestoneRead",
    "MilestoneUpdate",
    "NotificationRead",
    "NotificationSend",
    "OwnershipTransfer",
    "PageEnvelope",
    "PasswordChangeRequest",
    "ProfileUpdate",
    "ProgressUpdate",
    "ProjectCreate",
    "ProjectDetailRead",
    "ProjectRead",
    "ProjectUpdate",
    "ProjectUpdatePost",
    "ProposalCreate",
    "ProposalRead",
    "ProposalStatusUpdate",
    "PublicUserRead",
    "ReactionRead",
    "ReactionRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "ReviewCreate",
    "SkillsUpdate",
    "SubtaskCreate",
    "SystemNotificationCreate",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "TeamCreate",
    "TeamRead",
    "TeamUpdate",
    "TimeEntryRead",
    "TimeTrackingRequest",
    "Token",
    "UnreadCountsRead",
    "UserNotificationCreate",
    "UserRead",
    "UserStatsRead",
]
