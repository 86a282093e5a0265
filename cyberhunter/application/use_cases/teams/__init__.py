"""Use cases for teams, their members and invitations."""

from .assign_project import assign_team_to_project
from .manage_teams import (
    create_team,
    delete_team,
    ensure_team_admin,
    get_team_or_404,
    list_my_teams,
    list_teams,
    update_team,
)
from .membership import (
    accept_invitation,
    decline_invitation,
    invite_member,
    leave_team,
    list_my_invitations,
    remove_member,
    transfer_ownership,
    update_member,
)

__all__ = [
    "accept_invitation",
    "assign_team_to_project",
    "create_team",
    "decline_invitation",
    "delete_team",
    "ensure_team_admin",
    "get_team_or_404",
    "invite_member",
    "leave_team",
    "list_my_invitations",
    "list_my_teams",
    "list_teams",
    "remove_member",
    "transfer_ownership",
    "update_member",
    "update_team",
]
