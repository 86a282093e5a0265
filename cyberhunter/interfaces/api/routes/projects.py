"""Endpoints for projects, their proposals, milestones and reviews."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.projects import (
    ProjectDetail,
    add_milestone,
    add_review,
    complete_milestone,
    complete_project,
    create_project,
    delete_project,
    get_project,
    list_projects,
    list_proposals,
    list_saved_projects,
    post_project_update,
    respond_to_proposal,
    submit_proposal,
    toggle_saved_project,
    update_milestone,
    update_project,
)
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.interfaces.api.dependencies import get_current_active_user, get_page
from cyberhunter.interfaces.api.routes.users import split_csv
from cyberhunter.interfaces.api.schemas import (
    MessageResponse,
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
    page_envelope,
)
from cyberhunter.utils import PageRequest

router = APIRouter(prefix="/projects", tags=["projects"])


def _detail(detail: ProjectDetail) -> ProjectDetailRead:
    proposals = None
    if detail.proposals is not None:
        proposals = [ProposalRead.model_validate(item) for item in detail.proposals]
    return ProjectDetailRead(
        **ProjectRead.model_validate(detail.project).model_dump(),
        milestones=[MilestoneRead.model_validate(item) for item in detail.milestones],
        proposals=proposals,
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
def publish_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = create_project(db, actor=current_user, **payload.model_dump())
    return {"success": True, "project": ProjectRead.model_validate(project)}


@router.get("/")
def browse_projects(
    search: str | None = None,
    category: str | None = None,
    skills: str | None = None,
    min_budget: float | None = None,
    max_budget: float | None = None,
    project_status: str | None = Query(default=None, alias="status"),
    sort: Literal["newest", "oldest", "budget_high", "budget_low", "deadline"] = "newest",
    page: PageRequest = Depends(get_page),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    """Browse projects; only open ones unless ``status`` says otherwise."""

    projects, total = list_projects(
        db,
        page=page,
        search=search,
        category=category,
        skills=split_csv(skills),
        min_budget=min_budget,
        max_budget=max_budget,
        status=project_status or "open",
        sort=sort,
    )
    return page_envelope(
        "projects", [ProjectRead.model_validate(project) for project in projects], total, page
    )


@router.get("/saved")
def read_saved_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    projects = list_saved_projects(db, actor=current_user)
    return {
        "success": True,
        "count": len(projects),
        "projects": [ProjectRead.model_validate(project) for project in projects],
    }


@router.get("/{project_id}")
def read_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    detail = get_project(db, project_id=project_id, viewer=current_user)
    return {"success": True, "project": _detail(detail)}


@router.put("/{project_id}")
def edit_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = update_project(
        db, actor=current_user, project_id=project_id, **payload.model_dump(exclude_unset=True)
    )
    return {"success": True, "project": ProjectRead.model_validate(project)}


@router.delete("/{project_id}", response_model=MessageResponse)
def remove_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    delete_project(db, actor=current_user, project_id=project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post("/{project_id}/proposals", status_code=status.HTTP_201_CREATED)
def send_proposal(
    project_id: int,
    payload: ProposalCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    proposal = submit_proposal(
        db, actor=current_user, project_id=project_id, **payload.model_dump()
    )
    return {"success": True, "proposal": ProposalRead.model_validate(proposal)}


@router.get("/{project_id}/proposals")
def read_proposals(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    proposals = list_proposals(db, actor=current_user, project_id=project_id)
    return {
        "success": True,
        "count": len(proposals),
        "proposals": [ProposalRead.model_validate(proposal) for proposal in proposals],
    }


@router.put("/{project_id}/proposals/{proposal_id}")
def answer_proposal(
    project_id: int,
    proposal_id: int,
    payload: ProposalStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project, proposal = respond_to_proposal(
        db,
        actor=current_user,
        project_id=project_id,
        proposal_id=proposal_id,
        status=payload.status,
    )
    return {
        "success": True,
        "project": ProjectRead.model_validate(project),
        "proposal": ProposalRead.model_validate(proposal),
    }


@router.post("/{project_id}/milestones", status_code=status.HTTP_201_CREATED)
def create_milestone(
    project_id: int,
    payload: MilestoneCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    milestone = add_milestone(
        db, actor=current_user, project_id=project_id, **payload.model_dump()
    )
    return {"success": True, "milestone": MilestoneRead.model_validate(milestone)}


@router.put("/{project_id}/milestones/{milestone_id}")
def edit_milestone(
    project_id: int,
    milestone_id: int,
    payload: MilestoneUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    milestone = update_milestone(
        db,
        actor=current_user,
        project_id=project_id,
        milestone_id=milestone_id,
        **payload.model_dump(exclude_unset=True),
    )
    return {"success": True, "milestone": MilestoneRead.model_validate(milestone)}


@router.put("/{project_id}/milestones/{milestone_id}/complete")
def finish_milestone(
    project_id: int,
    milestone_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    milestone = complete_milestone(
        db, actor=current_user, project_id=project_id, milestone_id=milestone_id
    )
    return {"success": True, "milestone": MilestoneRead.model_validate(milestone)}


@router.post("/{project_id}/save")
def save_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    saved = toggle_saved_project(db, actor=current_user, project_id=project_id)
    message = "Project saved" if saved else "Project removed from saved"
    return {"success": True, "saved": saved, "message": message}


@router.put("/{project_id}/complete")
def finish_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = complete_project(db, actor=current_user, project_id=project_id)
    return {"success": True, "project": ProjectRead.model_validate(project)}


@router.post("/{project_id}/reviews", status_code=status.HTTP_201_CREATED)
def review_project(
    project_id: int,
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = add_review(
        db,
        actor=current_user,
        project_id=project_id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return {"success": True, "project": ProjectRead.model_validate(project)}


@router.post("/{project_id}/updates")
def broadcast_update(
    project_id: int,
    payload: ProjectUpdatePost,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    update = post_project_update(
        db,
        actor=current_user,
        project_id=project_id,
        update_type=payload.update_type,
        content=payload.content,
    )
    return {"success": True, "update": update.as_event()}
