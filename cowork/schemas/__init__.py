"""
Pydantic schemas for request/response validation
"""
from cowork.schemas.user import (
    MessageResponse,
    ProfileUpdate,
    UserCreate,
    UserEnvelope,
    UserLogin,
    UserResponse,
    UserSearchEnvelope,
    UserSearchResult,
    UsersEnvelope,
    UserSummary,
)
from cowork.schemas.project import (
    ProjectArchiveUpdate,
    ProjectCreate,
    ProjectEnvelope,
    ProjectListItem,
    ProjectResponse,
    ProjectsEnvelope,
    ProjectStarEnvelope,
)
from cowork.schemas.project_member import (
    InvitationsEnvelope,
    InviteCreate,
    InviteEnvelope,
    InviteResponse,
    MembersEnvelope,
    MyInvitationResponse,
    ProjectMemberResponse,
)
from cowork.schemas.collaborator import (
    CollaboratorAdd,
    CollaboratorEnvelope,
    CollaboratorResponse,
    CollaboratorsEnvelope,
)
from cowork.schemas.task import TaskCreate, TaskEnvelope, TaskResponse, TasksEnvelope, TaskStatusUpdate, TaskUpdate
from cowork.schemas.time_log import (
    ActiveTimerEnvelope,
    TaskTimeLogsEnvelope,
    TimeLogResponse,
    TimeLogsEnvelope,
    TimerStart,
    TimerStartEnvelope,
    TimerStop,
    TimerStopEnvelope,
)

__all__ = [
    "MessageResponse",
    "ProfileUpdate",
    "UserCreate",
    "UserEnvelope",
    "UserLogin",
    "UserResponse",
    "UserSearchEnvelope",
    "UserSearchResult",
    "UsersEnvelope",
    "UserSummary",
    "ProjectArchiveUpdate",
    "ProjectCreate",
    "ProjectEnvelope",
    "ProjectListItem",
    "ProjectResponse",
    "ProjectsEnvelope",
    "ProjectStarEnvelope",
    "InvitationsEnvelope",
    "InviteCreate",
    "InviteEnvelope",
    "InviteResponse",
    "MembersEnvelope",
    "MyInvitationResponse",
    "ProjectMemberResponse",
    "CollaboratorAdd",
    "CollaboratorEnvelope",
    "CollaboratorResponse",
    "CollaboratorsEnvelope",
    "TaskCreate",
    "TaskEnvelope",
    "TaskResponse",
    "TasksEnvelope",
    "TaskStatusUpdate",
    "TaskUpdate",
    "ActiveTimerEnvelope",
    "TaskTimeLogsEnvelope",
    "TimeLogResponse",
    "TimeLogsEnvelope",
    "TimerStart",
    "TimerStartEnvelope",
    "TimerStop",
    "TimerStopEnvelope",
]
