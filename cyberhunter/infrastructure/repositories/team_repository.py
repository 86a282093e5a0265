"""Persistence helpers for teams, memberships and invitations."""

from __future__ import annotations

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import (
    INVITATION_STATUS_PENDING,
    TEAM_ROLE_MEMBER,
    Team,
    TeamInvitation,
    TeamMember,
)
from cyberhunter.domain.errors import ConflictError
from cyberhunter.infrastructure.models import TeamInvitationModel, TeamMemberModel, TeamModel
from cyberhunter.utils import ensure_app_timezone, now_in_app_naive_datetime

from .base import insert_ignoring_duplicates, upsert


class TeamRepository:
    """Provide persistence operations for :class:`Team` aggregates.

    Membership rows are written with single INSERT/DELETE/UPDATE statements so
    that two requests joining the same team cannot overwrite each other.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, team_id: int) -> Team | None:
        model = self.session.get(TeamModel, team_id)
        if model is None:
            return None
        self.session.refresh(model, ["members"])
        return self._to_entity(model)

    def search(
        self,
        *,
        search: str | None = None,
        active_only: bool = True,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Team], int]:
        query = self.session.query(TeamModel)
        if active_only:
            query = query.filter(TeamModel.is_active.is_(True))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(TeamModel.name.ilike(pattern), TeamModel.description.ilike(pattern))
            )
        total = query.count()
        query = query.order_by(TeamModel.created_at.desc(), TeamModel.id.desc())
        if limit is not None:
            query = query.offset(offset).limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def list_for_member(self, user_id: int) -> list[Team]:
        query = (
            self.session.query(TeamModel)
            .join(TeamMemberModel, TeamMemberModel.team_id == TeamModel.id)
            .filter(TeamMemberModel.user_id == user_id)
            .order_by(TeamModel.created_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def team_ids_for_member(self, user_id: int) -> list[int]:
        rows = self.session.execute(
            select(TeamMemberModel.team_id).where(TeamMemberModel.user_id == user_id)
        )
        return [team_id for (team_id,) in rows]

    def member_ids(self, team_id: int) -> list[int]:
        rows = self.session.execute(
            select(TeamMemberModel.user_id)
            .where(TeamMemberModel.team_id == team_id)
            .order_by(TeamMemberModel.joined_at)
        )
        return [user_id for (user_id,) in rows]

    def count(self) -> int:
        return self.session.query(TeamModel).count()

    def add(self, team: Team) -> Team:
        model = TeamModel(
            name=team.name,
            description=team.description,
            creator_id=team.creator_id,
            skills=list(team.skills),
            is_active=team.is_active,
        )
        self.session.add(model)
        self.session.flush()
        for member in team.members:
            self.add_member(
                model.id, member.user_id, role=member.role, permissions=member.permissions
            )
        return self.get(model.id)

    def update(self, team: Team) -> Team:
        model = self.session.get(TeamModel, team.id)
        if model is None:
            msg = f"Team with id {team.id} not found"
            raise ValueError(msg)
        if team.version is not None and model.version != team.version:
            raise ConflictError("The team was modified by another request")
        model.name = team.name
        model.description = team.description
        model.creator_id = team.creator_id
        model.skills = list(team.skills)
        model.is_active = team.is_active
        self.session.flush()
        return self.get(model.id)

    def delete(self, team_id: int) -> None:
        model = self.session.get(TeamModel, team_id)
        if model is not None:
            self.session.delete(model)
            self.session.flush()

    # -- members ----------------------------------------------------------

    def add_member(
        self,
        team_id: int,
        user_id: int,
        *,
        role: str = TEAM_ROLE_MEMBER,
        permissions: list[str] | None = None,
    ) -> bool:
        """Insert a membership row; ``False`` when the user already belongs."""

        inserted = insert_ignoring_duplicates(
            self.session,
            TeamMemberModel.__table__,
            [
                {
                    "team_id": team_id,
                    "user_id": user_id,
                    "role": role,
                    "permissions": list(permissions or []),
                    "joined_at": now_in_app_naive_datetime(),
                }
            ],
        )
        return inserted > 0

    def remove_member(self, team_id: int, user_id: int) -> bool:
        table = TeamMemberModel.__table__
        removed = self.session.execute(
            delete(table).where(table.c.team_id == team_id, table.c.user_id == user_id)
        ).rowcount
        return bool(removed)

    def update_member(
        self,
        team_id: int,
        user_id: int,
        *,
        role: str | None = None,
        permissions: list[str] | None = None,
    ) -> bool:
        values: dict[str, object] = {}
        if role is not None:
            values["role"] = role
        if permissions is not None:
            values["permissions"] = list(permissions)
        if not values:
            return True
        table = TeamMemberModel.__table__
        changed = self.session.execute(
            update(table)
            .where(table.c.team_id == team_id, table.c.user_id == user_id)
            .values(**values)
        ).rowcount
        return bool(changed)

    # -- invitations ------------------------------------------------------

    def get_invitation(self, team_id: int, user_id: int) -> TeamInvitation | None:
        model = (
            self.session.query(TeamInvitationModel)
            .filter(TeamInvitationModel.team_id == team_id)
            .filter(TeamInvitationModel.user_id == user_id)
            .first()
        )
        return self._invitation_to_entity(model) if model else None

    def save_invitation(self, invitation: TeamInvitation) -> TeamInvitation:
        """Create the invitation or reopen an earlier answered one."""

        upsert(
            self.session,
            TeamInvitationModel.__table__,
            {
                "team_id": invitation.team_id,
                "user_id": invitation.user_id,
                "invited_by": invitation.invited_by,
                "role": invitation.role,
                "status": invitation.status,
                "created_at": now_in_app_naive_datetime(),
                "responded_at": None,
            },
            conflict_columns=("team_id", "user_id"),
            update_columns=("invited_by", "role", "status", "created_at", "responded_at"),
        )
        saved = self.get_invitation(invitation.team_id, invitation.user_id)
        if saved is None:  # pragma: no cover - the row was just written
            raise ValueError("Invitation could not be stored")
        return saved

    def respond_to_invitation(self, team_id: int, user_id: int, *, status: str) -> bool:
        """Answer a pending invitation; ``False`` when none is pending."""

        table = TeamInvitationModel.__table__
        changed = self.session.execute(
            update(table)
            .where(
                table.c.team_id == team_id,
                table.c.user_id == user_id,
                table.c.status == INVITATION_STATUS_PENDING,
            )
            .values(status=status, responded_at=now_in_app_naive_datetime())
        ).rowcount
        self.session.expire_all()
        return bool(changed)

    def list_pending_for_user(self, user_id: int) -> list[TeamInvitation]:
        query = (
            self.session.query(TeamInvitationModel)
            .filter(TeamInvitationModel.user_id == user_id)
            .filter(TeamInvitationModel.status == INVITATION_STATUS_PENDING)
            .order_by(TeamInvitationModel.created_at.desc())
        )
        return [self._invitation_to_entity(model) for model in query.all()]

    # -- mapping ----------------------------------------------------------

    @staticmethod
    def _to_entity(model: TeamModel) -> Team:
        return Team(
            id=model.id,
            name=model.name,
            creator_id=model.creator_id,
            description=model.description,
            skills=list(model.skills or []),
            is_active=model.is_active,
            members=[
                TeamMember(
                    user_id=member.user_id,
                    role=member.role,
                    permissions=list(member.permissions or []),
                    joined_at=ensure_app_timezone(member.joined_at),
                )
                for member in model.members
            ],
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            version=model.version,
        )

    @staticmethod
    def _invitation_to_entity(model: TeamInvitationModel) -> TeamInvitation:
        return TeamInvitation(
            id=model.id,
            team_id=model.team_id,
            user_id=model.user_id,
            invited_by=model.invited_by,
            role=model.role,
            status=model.status,
            created_at=ensure_app_timezone(model.created_at),
            responded_at=ensure_app_timezone(model.responded_at),
        )


__all__ = ["TeamRepository"]
