"""Training API routes (admin)"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.content import TrainingCreate, TrainingUpdate
from app.services import training_service

router = APIRouter(prefix="/api/trainings", tags=["trainings"])


@router.get("")
def list_trainings(
    speaker_id: Optional[int] = None,
    type: Optional[str] = None,
    level: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    return {"trainings": training_service.list_trainings(
        db, speaker_id=speaker_id, type=type, level=level, status=status, search=search
    )}


@router.post("")
def create_training(request_data: TrainingCreate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        training = training_service.create_training(request_data.model_dump(), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "training": training}


@router.get("/{training_id}")
def get_training(training_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"training": training_service.get_training(training_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.patch("/{training_id}")
def update_training(training_id: int, request_data: TrainingUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        training = training_service.update_training(training_id, request_data.model_dump(exclude_unset=True), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "training": training}


@router.delete("/{training_id}")
def delete_training(training_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        training_service.delete_training(training_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True}


@router.post("/{training_id}/toggle-featured")
def toggle_featured(training_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"success": True, **training_service.toggle_training_featured(training_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
