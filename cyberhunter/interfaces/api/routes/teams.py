"""Endpoints for teams, membership and invitations."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.teams import (
    accept_invitation,
    assign_team_to_project,
    create_team,
    decline_invitation,
    delete_team,
    get_team_or_404,
    invite_member,
    leave_team,
    list_my_invitations,
    list_my_teams,
    list_teams,
    remove_member,
    transfer_ownership,
    update_member,
    update_team,
)
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_current_active_user, get_page
from cyberhunter.interfaces.api.schemas import (
    InvitationRead,
    InviteRequest,
    MemberUpdate,
    MessageResponse,
    OwnershipTransfer,
    ProjectRead,
    TeamCreate,
    TeamRead,
    TeamUpdate,
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/teams", tags=["teams"])


def _team_response(team) -> dict:
    return {"success": True, "team": TeamRead.model_validate(team)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def form_team(
    payload: TeamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _team_response(create_team(db, actor=current_user, **payload.model_dump()))


@router.get("/")
def browse_teams(
    search: str | None = None,
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    teams, total = list_teams(db, page=page, search=search)
    return page_envelope("teams", [TeamRead.model_validate(team) for team in teams], total, page)


@router.get("/mine")
def read_my_teams(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    teams = list_my_teams(db, actor=current_user)
    return {
        "success": True,
        "count": len(teams),
        "teams": [TeamRead.model_validate(team) for team in teams],
    }


@router.get("/invitations")
def read_my_invitations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    invitations = list_my_invitations(db, actor=current_user)
    return {
        "success": True,
        "count": len(invitations),
        "invitations": [InvitationRead.model_validate(item) for item in invitations],
    }


@router.get("/{team_id}")
def read_team(
    team_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    return _team_response(get_team_or_404(db, team_id))


@router.put("/{team_id}")
def edit_team(
    team_id: int,
    payload: TeamUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    team = update_team(
        db, actor=current_user, team_id=team_id, **payload.model_dump(exclude_unset=True)
    )
    return _team_response(team)


@router.delete("/{team_id}", response_model=MessageResponse)
def disband_team(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    delete_team(db, actor=current_user, team_id=team_id)
    return MessageResponse(message="Team deleted successfully")


@router.post("/{team_id}/invitations", status_code=status.HTTP_201_CREATED)
def invite(
    team_id: int,
    payload: InviteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    invitation = invite_member(
        db, actor=current_user, team_id=team_id, user_id=payload.user_id, role=payload.role
    )
    return {
        "success": True,
        "message": "Invitation sent successfully",
        "invitation": InvitationRead.model_validate(invitation),
    }


@router.post("/{team_id}/invitations/accept")
def accept(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _team_response(accept_invitation(db, actor=current_user, team_id=team_id))


@router.post("/{team_id}/invitations/decline", response_model=MessageResponse)
def decline(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    decline_invitation(db, actor=current_user, team_id=team_id)
    return MessageResponse(message="Invitation declined")


@router.delete("/{team_id}/members/{user_id}")
def drop_member(
    team_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _team_response(
        remove_member(db, actor=current_user, team_id=team_id, user_id=user_id)
    )


@router.put("/{team_id}/members/{user_id}")
def change_member(
    team_id: int,
    user_id: int,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    team = update_member(
        db,
        actor=current_user,
        team_id=team_id,
        user_id=user_id,
        role=payload.role,
        permissions=payload.permissions,
    )
    return _team_response(team)


@router.post("/{team_id}/leave", response_model=MessageResponse)
def leave(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    leave_team(db, actor=current_user, team_id=team_id)
    return MessageResponse(message="You have left the team")


@router.put("/{team_id}/transfer-ownership")
def hand_over(
    team_id: int,
    payload: OwnershipTransfer,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    team = transfer_ownership(
        db, actor=current_user, team_id=team_id, new_owner_id=payload.new_owner_id
    )
    return _team_response(team)


@router.post("/{team_id}/projects/{project_id}")
def take_project(
    team_id: int,
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = assign_team_to_project(
        db, actor=current_user, team_id=team_id, project_id=project_id
    )
    return {"success": True, "project": ProjectRead.model_validate(project)}
