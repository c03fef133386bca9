"""Speaker API routes (admin)"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.content import SpeakerCreate, SpeakerUpdate
from app.services import speaker_service

router = APIRouter(prefix="/api/speakers", tags=["speakers"])


@router.get("")
def list_speakers(search: Optional[str] = None, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    return {"speakers": speaker_service.list_speakers(db, search=search)}


@router.post("")
def create_speaker(request_data: SpeakerCreate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        speaker = speaker_service.create_speaker(request_data.model_dump(), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "speaker": speaker}


@router.get("/{speaker_id}")
def get_speaker(speaker_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"speaker": speaker_service.get_speaker(speaker_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.patch("/{speaker_id}")
def update_speaker(speaker_id: int, request_data: SpeakerUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        speaker = speaker_service.update_speaker(speaker_id, request_data.model_dump(exclude_unset=True), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "speaker": speaker}


@router.delete("/{speaker_id}")
def delete_speaker(speaker_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        speaker_service.delete_speaker(speaker_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True}
