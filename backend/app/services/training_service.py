"""Training service - CRUD for trainings"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ServiceError
from app.db.helpers import apply_search, ensure_unique, get_or_404, to_dict
from app.models.speaker import Speaker
from app.models.training import Training
from app.utils.templates import generate_slug

logger = logging.getLogger(__name__)

SLUG_CONFLICT = "A training with this slug already exists"


def _speaker_name(speaker_id: int, db: Session) -> str:
    speaker = db.query(Speaker).filter(Speaker.id == speaker_id).first()
    if not speaker:
        raise NotFoundError("Speaker not found")
    return speaker.name


def create_training(data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Create a training; speaker_name is copied from the speaker"""
    slug = (data.get("slug") or "").strip() or generate_slug(data["title"])
    if not slug:
        raise ServiceError("Slug cannot be empty")
    ensure_unique(db, Training, "slug", slug, SLUG_CONFLICT)
    speaker_name = _speaker_name(data["speaker_id"], db)

    fields = {k: v for k, v in data.items() if k != "slug"}
    training = Training(**fields, slug=slug, speaker_name=speaker_name, views=0)
    db.add(training)
    db.commit()
    db.refresh(training)
    logger.info(f"Training {training.id} created (slug: {slug}, speaker: {speaker_name})")
    return to_dict(training)


def update_training(training_id: int, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    training = get_or_404(db, Training, training_id, "Training")

    if "slug" in data:
        slug = (data["slug"] or "").strip() or generate_slug(data.get("title") or training.title)
        if not slug:
            raise ServiceError("Slug cannot be empty")
        ensure_unique(db, Training, "slug", slug, SLUG_CONFLICT, exclude_id=training.id)
        data = {**data, "slug": slug}

    if data.get("speaker_id") is not None:
        data = {**data, "speaker_name": _speaker_name(data["speaker_id"], db)}
    else:
        data.pop("speaker_id", None)

    for key, value in data.items():
        setattr(training, key, value)
    db.commit()
    db.refresh(training)
    return to_dict(training)


def delete_training(training_id: int, db: Session) -> None:
    training = get_or_404(db, Training, training_id, "Training")
    db.delete(training)
    db.commit()
    logger.info(f"Training {training_id} deleted")


def get_training(training_id: int, db: Session) -> Dict[str, Any]:
    return to_dict(get_or_404(db, Training, training_id, "Training"))


def list_trainings(db: Session, speaker_id: Optional[int] = None, type: Optional[str] = None,
                   level: Optional[str] = None, status: Optional[str] = None,
                   search: Optional[str] = None) -> List[Dict[str, Any]]:
    query = db.query(Training)
    if speaker_id is not None:
        query = query.filter(Training.speaker_id == speaker_id)
    if type:
        query = query.filter(Training.type == type)
    if level:
        query = query.filter(Training.level == level)
    if status:
        query = query.filter(Training.status == status)
    query = apply_search(query, search, [Training.title, Training.description, Training.speaker_name])
    return [to_dict(t) for t in query.order_by(Training.created_at.desc(), Training.id.desc()).all()]


def toggle_training_featured(training_id: int, db: Session) -> Dict[str, Any]:
    training = get_or_404(db, Training, training_id, "Training")
    training.featured = not training.featured
    db.commit()
    return {"id": training.id, "featured": training.featured}
