"""Cowork Database Models"""
from cowork.models.user import User
from cowork.models.project import Project
from cowork.models.project_member import MemberRole, MembershipStatus, ProjectMember, STATUS_RANK
from cowork.models.task import Task, TaskPriority, TaskStatus
from cowork.models.task_collaborator import TaskCollaborator
from cowork.models.time_log import TimeLog

__all__ = [
    "User",
    "Project",
    "ProjectMember",
    "MemberRole",
    "MembershipStatus",
    "STATUS_RANK",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskCollaborator",
    "TimeLog",
]
