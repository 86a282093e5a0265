"""Persistence helpers for projects, proposals, milestones and saved projects."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session

from cyberhunter.domain.entities import Milestone, Project, Proposal
from cyberhunter.domain.errors import ConflictError
from cyberhunter.infrastructure.models import (
    MilestoneModel,
    ProjectFreelancerModel,
    ProjectModel,
    ProjectSaveModel,
    ProposalModel,
    TeamMemberModel,
)
from cyberhunter.utils import ensure_app_naive_datetime, ensure_app_timezone

from .base import insert_ignoring_duplicates

_SORT_ORDERS = {
    "newest": (ProjectModel.created_at.desc(), ProjectModel.id.desc()),
    "oldest": (ProjectModel.created_at.asc(), ProjectModel.id.asc()),
    "budget_high": (ProjectModel.budget.desc(), ProjectModel.id.desc()),
    "budget_low": (ProjectModel.budget.asc(), ProjectModel.id.asc()),
    "deadline": (ProjectModel.deadline.asc(), ProjectModel.id.asc()),
}


class ProjectRepository:
    """Provide persistence operations for :class:`Project` aggregates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # -- projects ---------------------------------------------------------

    def get(self, project_id: int) -> Project | None:
        model = self.session.get(ProjectModel, project_id)
        return self._to_entity(model) if model else None

    def search(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        skills: Sequence[str] | None = None,
        min_budget: float | None = None,
        max_budget: float | None = None,
        status: str | None = None,
        visibility: str | None = None,
        sort: str = "newest",
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Project], int]:
        query = self.session.query(ProjectModel)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(ProjectModel.title.ilike(pattern), ProjectModel.description.ilike(pattern))
            )
        if category:
            query = query.filter(ProjectModel.category == category)
        if min_budget is not None:
            query = query.filter(ProjectModel.budget >= min_budget)
        if max_budget is not None:
            query = query.filter(ProjectModel.budget <= max_budget)
        if status:
            query = query.filter(ProjectModel.status == status)
        if visibility:
            query = query.filter(ProjectModel.visibility == visibility)
        query = query.order_by(*_SORT_ORDERS.get(sort, _SORT_ORDERS["newest"]))

        wanted = {skill.strip().lower() for skill in skills or [] if skill.strip()}
        if not wanted:
            total = query.count()
            if limit is not None:
                query = query.offset(offset).limit(limit)
            return [self._to_entity(model) for model in query.all()], total

        # JSON arrays are not searchable portably, so skill matching runs here.
        matching = [
            model
            for model in query.all()
            if wanted & {str(skill).lower() for skill in model.skills or []}
        ]
        window = matching[offset : offset + limit] if limit is not None else matching[offset:]
        return [self._to_entity(model) for model in window], len(matching)

    def list_for_participant(self, user_id: int) -> list[Project]:
        """Projects where ``user_id`` is client, freelancer or assigned-team member."""

        freelancer_projects = select(ProjectFreelancerModel.project_id).where(
            ProjectFreelancerModel.freelancer_id == user_id
        )
        member_teams = select(TeamMemberModel.team_id).where(TeamMemberModel.user_id == user_id)
        query = (
            self.session.query(ProjectModel)
            .filter(
                or_(
                    ProjectModel.client_id == user_id,
                    ProjectModel.id.in_(freelancer_projects),
                    ProjectModel.assigned_team_id.in_(member_teams),
                )
            )
            .order_by(ProjectModel.created_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_ids_for_team(self, team_id: int) -> list[int]:
        rows = self.session.execute(
            select(ProjectModel.id).where(ProjectModel.assigned_team_id == team_id)
        )
        return [project_id for (project_id,) in rows]

    def count_by_status(self) -> dict[str, int]:
        rows = (
            self.session.query(ProjectModel.status, func.count(ProjectModel.id))
            .group_by(ProjectModel.status)
            .all()
        )
        return {status: count for status, count in rows}

    def count(self) -> int:
        return self.session.query(func.count(ProjectModel.id)).scalar() or 0

    def budget_totals(self) -> tuple[float, float]:
        """Return the summed budget of all projects and of completed ones."""

        total = self.session.query(func.coalesce(func.sum(ProjectModel.budget), 0)).scalar()
        completed = (
            self.session.query(func.coalesce(func.sum(ProjectModel.budget), 0))
            .filter(ProjectModel.status == "completed")
            .scalar()
        )
        return float(total or 0), float(completed or 0)

    def created_since(self, since: datetime) -> list[tuple[datetime, float]]:
        """Return ``(created_at, budget)`` for projects posted on or after ``since``."""

        rows = self.session.execute(
            select(ProjectModel.created_at, ProjectModel.budget).where(
                ProjectModel.created_at >= ensure_app_naive_datetime(since)
            )
        )
        return [(ensure_app_timezone(created_at), float(budget or 0)) for created_at, budget in rows]

    def add(self, project: Project) -> Project:
        model = ProjectModel()
        self._apply_entity_to_model(model, project)
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def update(self, project: Project) -> Project:
        model = self.session.get(ProjectModel, project.id)
        if model is None:
            msg = f"Project with id {project.id} not found"
            raise ValueError(msg)
        if project.version is not None and model.version != project.version:
            raise ConflictError("The project was modified by another request")
        self._apply_entity_to_model(model, project)
        self.session.flush()
        return self._to_entity(model)

    def delete(self, project_id: int) -> None:
        model = self.session.get(ProjectModel, project_id)
        if model is not None:
            self.session.delete(model)
            self.session.flush()

    def increment_views(self, project_id: int) -> None:
        self.session.execute(
            update(ProjectModel.__table__)
            .where(ProjectModel.__table__.c.id == project_id)
            .values(views=ProjectModel.__table__.c.views + 1)
        )
        model = self.session.get(ProjectModel, project_id)
        if model is not None:
            self.session.expire(model, ["views"])

    def unassign_team(self, team_id: int) -> None:
        self.session.execute(
            update(ProjectModel.__table__)
            .where(ProjectModel.__table__.c.assigned_team_id == team_id)
            .values(assigned_team_id=None)
        )

    def add_freelancer(self, project_id: int, freelancer_id: int) -> bool:
        inserted = insert_ignoring_duplicates(
            self.session,
            ProjectFreelancerModel.__table__,
            [{"project_id": project_id, "freelancer_id": freelancer_id}],
        )
        self._expire(project_id)
        return inserted > 0

    # -- saved projects ---------------------------------------------------

    def toggle_saved(self, project_id: int, user_id: int) -> bool:
        """Flip the bookmark and return whether the project is now saved."""

        removed = self.session.execute(
            delete(ProjectSaveModel.__table__).where(
                ProjectSaveModel.__table__.c.project_id == project_id,
                ProjectSaveModel.__table__.c.user_id == user_id,
            )
        ).rowcount
        if removed:
            return False
        insert_ignoring_duplicates(
            self.session,
            ProjectSaveModel.__table__,
            [{"project_id": project_id, "user_id": user_id}],
        )
        return True

    def list_saved(self, user_id: int) -> list[Project]:
        query = (
            self.session.query(ProjectModel)
            .join(ProjectSaveModel, ProjectSaveModel.project_id == ProjectModel.id)
            .filter(ProjectSaveModel.user_id == user_id)
            .order_by(ProjectSaveModel.saved_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    # -- proposals --------------------------------------------------------

    def get_proposal(self, project_id: int, proposal_id: int) -> Proposal | None:
        model = self.session.get(ProposalModel, proposal_id)
        if model is None or model.project_id != project_id:
            return None
        return self._proposal_to_entity(model)

    def find_proposal(self, project_id: int, freelancer_id: int) -> Proposal | None:
        model = (
            self.session.query(ProposalModel)
            .filter(ProposalModel.project_id == project_id)
            .filter(ProposalModel.freelancer_id == freelancer_id)
            .first()
        )
        return self._proposal_to_entity(model) if model else None

    def list_proposals(self, project_id: int) -> list[Proposal]:
        query = (
            self.session.query(ProposalModel)
            .filter(ProposalModel.project_id == project_id)
            .order_by(ProposalModel.submitted_at.asc(), ProposalModel.id.asc())
        )
        return [self._proposal_to_entity(model) for model in query.all()]

    def add_proposal(self, proposal: Proposal) -> Proposal:
        model = ProposalModel(
            project_id=proposal.project_id,
            freelancer_id=proposal.freelancer_id,
            cover_letter=proposal.cover_letter,
            bid_amount=proposal.bid_amount,
            estimated_duration=proposal.estimated_duration,
            status=proposal.status,
        )
        self.session.add(model)
        self.session.flush()
        return self._proposal_to_entity(model)

    def set_proposal_status(self, proposal_id: int, *, expected: str, status: str) -> bool:
        """Move a proposal out of ``expected``; ``False`` when it already left it."""

        changed = self.session.execute(
            update(ProposalModel.__table__)
            .where(ProposalModel.__table__.c.id == proposal_id)
            .where(ProposalModel.__table__.c.status == expected)
            .values(status=status)
        ).rowcount
        model = self.session.get(ProposalModel, proposal_id)
        if model is not None:
            self.session.refresh(model)
        return bool(changed)

    # -- milestones -------------------------------------------------------

    def get_milestone(self, project_id: int, milestone_id: int) -> Milestone | None:
        model = self.session.get(MilestoneModel, milestone_id)
        if model is None or model.project_id != project_id:
            return None
        return self._milestone_to_entity(model)

    def list_milestones(self, project_id: int) -> list[Milestone]:
        query = (
            self.session.query(MilestoneModel)
            .filter(MilestoneModel.project_id == project_id)
            .order_by(MilestoneModel.id.asc())
        )
        return [self._milestone_to_entity(model) for model in query.all()]

    def save_milestone(self, milestone: Milestone) -> Milestone:
        model = (
            self.session.get(MilestoneModel, milestone.id)
            if milestone.id is not None
            else MilestoneModel(project_id=milestone.project_id)
        )
        if model is None:
            msg = f"Milestone with id {milestone.id} not found"
            raise ValueError(msg)
        model.title = milestone.title
        model.description = milestone.description
        model.due_date = ensure_app_naive_datetime(milestone.due_date)
        model.amount = milestone.amount
        model.status = milestone.status
        model.completed_at = ensure_app_naive_datetime(milestone.completed_at)
        self.session.add(model)
        self.session.flush()
        return self._milestone_to_entity(model)

    # -- mapping ----------------------------------------------------------

    def _expire(self, project_id: int) -> None:
        model = self.session.get(ProjectModel, project_id)
        if model is not None:
            self.session.expire(model, ["freelancer_links"])

    @staticmethod
    def _apply_entity_to_model(model: ProjectModel, project: Project) -> None:
        model.title = project.title
        model.description = project.description
        model.short_description = project.short_description
        model.client_id = project.client_id
        model.category = project.category
        model.skills = list(project.skills)
        model.budget = project.budget
        model.deadline = ensure_app_naive_datetime(project.deadline)
        model.duration = project.duration
        model.status = project.status
        model.visibility = project.visibility
        model.assigned_team_id = project.assigned_team_id
        model.reviews = dict(project.reviews)
        model.start_date = ensure_app_naive_datetime(project.start_date)
        model.completed_date = ensure_app_naive_datetime(project.completed_date)

    @staticmethod
    def _to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            title=model.title,
            description=model.description,
            client_id=model.client_id,
            category=model.category,
            budget=model.budget,
            short_description=model.short_description,
            skills=list(model.skills or []),
            deadline=ensure_app_timezone(model.deadline),
            duration=model.duration,
            status=model.status,
            visibility=model.visibility,
            assigned_team_id=model.assigned_team_id,
            assigned_freelancer_ids=[link.freelancer_id for link in model.freelancer_links],
            reviews=dict(model.reviews or {}),
            start_date=ensure_app_timezone(model.start_date),
            completed_date=ensure_app_timezone(model.completed_date),
            views=model.views or 0,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            version=model.version,
        )

    @staticmethod
    def _proposal_to_entity(model: ProposalModel) -> Proposal:
        return Proposal(
            id=model.id,
            project_id=model.project_id,
            freelancer_id=model.freelancer_id,
            cover_letter=model.cover_letter,
            bid_amount=model.bid_amount,
            estimated_duration=model.estimated_duration,
            status=model.status,
            submitted_at=ensure_app_timezone(model.submitted_at),
        )

    @staticmethod
    def _milestone_to_entity(model: MilestoneModel) -> Milestone:
        return Milestone(
            id=model.id,
            project_id=model.project_id,
            title=model.title,
            description=model.description,
            due_date=ensure_app_timezone(model.due_date),
            amount=model.amount,
            status=model.status,
            completed_at=ensure_app_timezone(model.completed_at),
        )


__all__ = ["ProjectRepository"]
