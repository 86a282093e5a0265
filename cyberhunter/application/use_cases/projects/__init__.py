"""Use cases for projects, proposals and milestones."""

from .access import (
    ensure_project_owner,
    ensure_project_participant,
    get_project_or_404,
    is_project_participant,
    project_participant_ids,
)
from .lifecycle import add_review, complete_project, list_saved_projects, toggle_saved_project
from .manage_projects import (
    ProjectDetail,
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)
from .milestones import add_milestone, complete_milestone, update_milestone
from .post_update import ProjectUpdate, post_project_update
from .proposals import list_proposals, respond_to_proposal, submit_proposal

__all__ = [
    "ProjectDetail",
    "ProjectUpdate",
    "add_milestone",
    "add_review",
    "complete_milestone",
    "complete_project",
    "create_project",
    "delete_project",
    "ensure_project_owner",
    "ensure_project_participant",
    "get_project",
    "get_project_or_404",
    "is_project_participant",
    "list_projects",
    "list_proposals",
    "list_saved_projects",
    "post_project_update",
    "project_participant_ids",
    "respond_to_proposal",
    "submit_proposal",
    "toggle_saved_project",
    "update_milestone",
    "update_project",
]
