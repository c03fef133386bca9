"""Speaker service - CRUD for training presenters"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.db.helpers import apply_search, ensure_unique, get_or_404, to_dict
from app.models.speaker import Speaker
from app.models.training import Training

logger = logging.getLogger(__name__)

NAME_CONFLICT = "A speaker with this name already exists"


def create_speaker(data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    ensure_unique(db, Speaker, "name", data["name"], NAME_CONFLICT)
    speaker = Speaker(**data)
    db.add(speaker)
    db.commit()
    db.refresh(speaker)
    logger.info(f"Speaker {speaker.id} created ({speaker.name})")
    return to_dict(speaker)


def update_speaker(speaker_id: int, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Update a speaker; a rename is copied onto every training it presents

    The speaker row and the trainings are committed together.
    """
    speaker = get_or_404(db, Speaker, speaker_id, "Speaker")

    renamed = "name" in data and data["name"] != speaker.name
    if renamed:
        ensure_unique(db, Speaker, "name", data["name"], NAME_CONFLICT, exclude_id=speaker.id)

    try:
        for key, value in data.items():
            setattr(speaker, key, value)
        if renamed:
            updated = db.query(Training).filter(Training.speaker_id == speaker.id).update(
                {Training.speaker_name: data["name"]}, synchronize_session="fetch"
            )
            logger.info(f"Speaker {speaker.id} renamed, updated {updated} training(s)")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(speaker)
    return to_dict(speaker)


def delete_speaker(speaker_id: int, db: Session) -> None:
    """Delete a speaker that no training references"""
    speaker = get_or_404(db, Speaker, speaker_id, "Speaker")

    assigned = db.query(Training).filter(Training.speaker_id == speaker.id).count()
    if assigned > 0:
        raise ConflictError(
            f"Cannot delete speaker. {assigned} training(s) are assigned to this speaker."
        )

    db.delete(speaker)
    db.commit()
    logger.info(f"Speaker {speaker_id} deleted")


def get_speaker(speaker_id: int, db: Session) -> Dict[str, Any]:
    """Speaker with the trainings it presents"""
    speaker = get_or_404(db, Speaker, speaker_id, "Speaker")
    data = to_dict(speaker)
    data["trainings"] = [
        {"id": t.id, "title": t.title, "slug": t.slug, "status": t.status}
        for t in speaker.trainings
    ]
    return data


def list_speakers(db: Session, search: Optional[str] = None) -> List[Dict[str, Any]]:
    """All speakers sorted by name"""
    query = apply_search(db.query(Speaker), search, [Speaker.name, Speaker.expertise])
    return [to_dict(s) for s in query.order_by(Speaker.name.asc()).all()]
