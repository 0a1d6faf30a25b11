"""
Milestone API - catalog listing and admin lifecycle
"""
from fastapi import APIRouter, Depends, Query, Body
from sqlalchemy.orm import Session
from typing import List, Optional

from cartrewards.core import get_db
from cartrewards.services import MilestoneService
from cartrewards.schemas import (
    MilestoneCreate, MilestoneUpdate, MilestoneResponse, MilestoneDuplicate, MilestoneLifecycleAction
)

milestones_router = APIRouter(tags=["Milestones"])

@milestones_router.get("/stores/{store_id}/milestones", response_model=List[MilestoneResponse])
def list_milestones(
    store_id: str,
    status: Optional[str] = Query(None, description="active, paused or deleted; omit for all non-deleted"),
    db: Session = Depends(get_db)
):
    return MilestoneService.list_by_status(db, store_id, status)

@milestones_router.post("/stores/{store_id}/milestones", response_model=MilestoneResponse)
def create_milestone(store_id: str, data: MilestoneCreate, db: Session = Depends(get_db)):
    return MilestoneService.create_milestone(db, store_id, data.model_dump())

@milestones_router.post("/stores/{store_id}/milestones/initialize", response_model=List[MilestoneResponse])
def initialize_milestones(store_id: str, db: Session = Depends(get_db)):
    """Seed the default 2500 / 3000 / 4000 / 5000 ladder"""
    return MilestoneService.initialize_default_milestones(db, store_id)

@milestones_router.put("/milestones/{milestone_id}", response_model=MilestoneResponse)
def update_milestone(milestone_id: str, data: MilestoneUpdate, db: Session = Depends(get_db)):
    return MilestoneService.update_milestone(db, milestone_id, data.model_dump(exclude_unset=True))

@milestones_router.delete("/milestones/{milestone_id}", response_model=MilestoneResponse)
def delete_milestone(milestone_id: str, db: Session = Depends(get_db)):
    return MilestoneService.soft_delete_milestone(db, milestone_id)

@milestones_router.post("/milestones/{milestone_id}/pause", response_model=MilestoneResponse)
def pause_milestone(
    milestone_id: str,
    data: Optional[MilestoneLifecycleAction] = Body(None),
    db: Session = Depends(get_db)
):
    return MilestoneService.pause_milestone(db, milestone_id, data.modified_by if data else None)

@milestones_router.post("/milestones/{milestone_id}/resume", response_model=MilestoneResponse)
def resume_milestone(
    milestone_id: str,
    data: Optional[MilestoneLifecycleAction] = Body(None),
    db: Session = Depends(get_db)
):
    return MilestoneService.resume_milestone(db, milestone_id, data.modified_by if data else None)

@milestones_router.post("/milestones/{milestone_id}/duplicate", response_model=MilestoneResponse)
def duplicate_milestone(
    milestone_id: str,
    data: Optional[MilestoneDuplicate] = Body(None),
    db: Session = Depends(get_db)
):
    return MilestoneService.duplicate_milestone(
        db,
        milestone_id,
        new_name=data.new_name if data else None,
        modified_by=data.modified_by if data else None
    )
