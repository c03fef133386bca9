"""Download (lead) API routes (admin)"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.downloads import FollowUpUpdate
from app.services import download_service

router = APIRouter(prefix="/api/downloads", tags=["downloads"])


@router.get("")
def list_downloads(
    resource_type: Optional[str] = None,
    email_status: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    search: Optional[str] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    return {"downloads": download_service.list_downloads(
        db, resource_type=resource_type, email_status=email_status,
        date_from=date_from, date_to=date_to, search=search
    )}


@router.get("/stats")
def download_stats(session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    return download_service.get_download_stats(db)


@router.get("/export")
def export_downloads(
    resource_type: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    """CSV download of the filtered leads"""
    export = download_service.export_downloads_csv(
        db, resource_type=resource_type, date_from=date_from, date_to=date_to
    )
    return Response(
        content=export["csv"],
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export["filename"]}"'}
    )


@router.get("/{download_id}")
def get_download(download_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"download": download_service.get_download(download_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.patch("/{download_id}/follow-up")
def update_follow_up(download_id: int, request_data: FollowUpUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        download = download_service.update_follow_up(
            download_id, request_data.follow_up_status, db,
            notes=request_data.follow_up_notes, assigned_to=request_data.assigned_to
        )
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "download": download}


@router.post("/{download_id}/retry-email")
def retry_email(download_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    """Send the delivery email again and wait for the outcome"""
    try:
        return download_service.retry_email(download_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.delete("/{download_id}")
def delete_download(download_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        download_service.delete_download(download_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True}
