"""Download service - lead capture, background delivery email and admin reporting"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.core.metrics import downloads_tracked_counter
from app.db.helpers import apply_date_range, apply_search, get_or_404, to_dict
from app.models.download import Download
from app.models.whitepaper import Whitepaper
from app.services.email_service import send_whitepaper_email
from app.tasks.email_dispatch import dispatch_download_email

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Date", "Resource Type", "Resource Title", "User Name", "User Email",
    "Company", "Job Title", "Email Status", "Follow-up Status",
]


# ============================================================================
# LEAD CAPTURE (public)
# ============================================================================

def track_whitepaper_download(whitepaper_id: int, contact: Dict[str, Any], db: Session,
                              metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Record a whitepaper download and queue the delivery email

    Returns as soon as the Download row is committed; the email outcome is
    written back onto the row later by the dispatcher.

    Raises:
        NotFoundError: If the whitepaper does not exist
    """
    whitepaper = db.query(Whitepaper).filter(Whitepaper.id == whitepaper_id).first()
    if not whitepaper:
        raise NotFoundError("Whitepaper not found")

    metadata = metadata or {}
    pdf_url = whitepaper.pdf_url
    whitepaper.downloads = Whitepaper.downloads + 1

    download = Download(
        resource_type="whitepaper",
        resource_id=str(whitepaper.id),
        resource_title=whitepaper.title,
        resource_url=pdf_url,
        user_email=contact["email"],
        user_name=contact["name"],
        user_phone=contact.get("phone"),
        user_company=contact.get("company"),
        user_job_title=contact.get("job_title"),
        form_data=contact.get("form_data"),
        email_sent=False,
        email_status="pending",
        follow_up_required=True,
        follow_up_status="pending",
        ip_address=metadata.get("ip_address"),
        user_agent=metadata.get("user_agent"),
        referrer=metadata.get("referrer"),
    )
    db.add(download)
    db.commit()
    db.refresh(download)

    download_id = download.id
    downloads_tracked_counter.labels(resource_type="whitepaper").inc()
    logger.info(f"Download {download_id} tracked for whitepaper {whitepaper_id} ({contact['email']})")

    # The email worker owns the row from here on
    dispatch_download_email(download_id)

    return {"success": True, "downloadId": download_id, "pdfUrl": pdf_url}


def create_download(data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Record a download of any resource type without sending an email"""
    download = Download(
        **data,
        email_sent=False,
        email_status="pending",
        follow_up_required=False,
        follow_up_status="pending",
    )
    db.add(download)
    db.commit()
    db.refresh(download)
    downloads_tracked_counter.labels(resource_type=download.resource_type).inc()
    return {"success": True, "downloadId": download.id}


# ============================================================================
# DELIVERY EMAIL
# ============================================================================

def deliver_download_email(download_id: int, db: Session) -> Optional[Dict[str, Any]]:
    """Send the delivery email for a download and record the outcome on it

    Never raises. A failure, including an unexpected exception, leaves the
    row with email_status "failed" and the error text in email_error.
    """
    download = db.query(Download).filter(Download.id == download_id).first()
    if not download:
        logger.warning(f"Download {download_id} disappeared before its email was sent")
        return None

    try:
        result = send_whitepaper_email(
            download.id,
            download.resource_title,
            download.resource_url,
            download.user_email,
            download.user_name,
            db,
        )
        download.email_sent = result.success
        download.email_status = "delivered" if result.success else "failed"
        download.email_sent_at = datetime.now(timezone.utc) if result.success else None
        download.email_error = result.error
        download.email_provider = result.provider
        download.email_id = result.message_id
        db.commit()
        if not result.success:
            logger.warning(f"Delivery email for download {download_id} failed: {result.error}")
        return result.to_dict()
    except Exception as e:
        logger.error(f"Delivery email for download {download_id} raised: {e}", exc_info=True)
        db.rollback()
        try:
            download = db.query(Download).filter(Download.id == download_id).first()
            if download:
                download.email_sent = False
                download.email_status = "failed"
                download.email_error = str(e)
                db.commit()
        except Exception as db_error:
            logger.error(f"Failed to record email failure on download {download_id}: {db_error}")
            db.rollback()
        return {"success": False, "error": str(e)}


def retry_email(download_id: int, db: Session) -> Dict[str, Any]:
    """Re-run the delivery email for a download that was not delivered

    Raises:
        NotFoundError: If the download does not exist
        ConflictError: If the email was already delivered
    """
    download = db.query(Download).filter(Download.id == download_id).first()
    if not download:
        raise NotFoundError("Download record not found")
    if download.email_status == "delivered":
        raise ConflictError("Email already delivered")

    deliver_download_email(download_id, db)
    db.refresh(download)
    return {"success": True, "message": "Email retry initiated", "email_status": download.email_status}


# ============================================================================
# ADMIN
# ============================================================================

def _filtered_query(db: Session, resource_type: Optional[str] = None, email_status: Optional[str] = None,
                    date_from: Optional[datetime] = None, date_to: Optional[datetime] = None,
                    search: Optional[str] = None):
    query = db.query(Download)
    if resource_type:
        query = query.filter(Download.resource_type == resource_type)
    if email_status:
        query = query.filter(Download.email_status == email_status)
    query = apply_date_range(query, Download.downloaded_at, date_from, date_to)
    query = apply_search(query, search, [
        Download.user_email, Download.user_name, Download.user_company, Download.resource_title
    ])
    return query.order_by(Download.downloaded_at.desc(), Download.id.desc())


def list_downloads(db: Session, **filters) -> List[Dict[str, Any]]:
    """Downloads matching the filters, newest first

    Filters: resource_type, email_status, date_from, date_to, search.
    """
    return [to_dict(d) for d in _filtered_query(db, **filters).all()]


def get_download(download_id: int, db: Session) -> Dict[str, Any]:
    return to_dict(get_or_404(db, Download, download_id, "Download record"))


def update_follow_up(download_id: int, status: str, db: Session, notes: Optional[str] = None,
                     assigned_to: Optional[str] = None) -> Dict[str, Any]:
    download = get_or_404(db, Download, download_id, "Download record")
    download.follow_up_status = status
    download.follow_up_notes = notes
    download.assigned_to = assigned_to
    db.commit()
    db.refresh(download)
    return to_dict(download)


def delete_download(download_id: int, db: Session) -> None:
    download = get_or_404(db, Download, download_id, "Download record")
    db.delete(download)
    db.commit()
    logger.info(f"Download {download_id} deleted")


def get_download_stats(db: Session) -> Dict[str, Any]:
    """Dashboard aggregates; an empty table gives zeros and empty collections"""
    now = datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    total = db.query(func.count(Download.id)).scalar() or 0
    this_week = db.query(func.count(Download.id)).filter(Download.downloaded_at >= week_ago).scalar() or 0
    this_month = db.query(func.count(Download.id)).filter(Download.downloaded_at >= month_ago).scalar() or 0

    by_resource_type = dict(
        db.query(Download.resource_type, func.count(Download.id)).group_by(Download.resource_type).all()
    )
    by_status = dict(
        db.query(Download.email_status, func.count(Download.id)).group_by(Download.email_status).all()
    )

    count = func.count(Download.id).label("count")
    top = (
        db.query(Download.resource_id, Download.resource_title, Download.resource_type, count)
        .group_by(Download.resource_id, Download.resource_title, Download.resource_type)
        .order_by(count.desc())
        .limit(5)
        .all()
    )
    recent = db.query(Download).order_by(Download.downloaded_at.desc(), Download.id.desc()).limit(10).all()

    return {
        "total": total,
        "this_week": this_week,
        "this_month": this_month,
        "by_resource_type": by_resource_type,
        "by_status": by_status,
        "top_resources": [
            {
                "resource_id": row.resource_id,
                "resource_title": row.resource_title,
                "resource_type": row.resource_type,
                "count": row.count,
            }
            for row in top
        ],
        "recent_downloads": [to_dict(d) for d in recent],
    }


def _csv_cell(value: Any) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def export_downloads_csv(db: Session, **filters) -> Dict[str, str]:
    """CSV export of the filtered downloads

    Header row, then one row per download with every field double-quoted,
    rows joined with "\\n".
    """
    rows = [",".join(CSV_HEADERS)]
    for d in _filtered_query(db, **filters).all():
        downloaded_at = d.downloaded_at.strftime("%Y-%m-%d %H:%M:%S") if d.downloaded_at else ""
        rows.append(",".join(_csv_cell(cell) for cell in [
            downloaded_at,
            d.resource_type,
            d.resource_title,
            d.user_name,
            d.user_email,
            d.user_company or "",
            d.user_job_title or "",
            d.email_status,
            d.follow_up_status,
        ]))

    filename = f"downloads-export-{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.csv"
    return {"csv": "\n".join(rows), "filename": filename}
