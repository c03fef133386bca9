"""Configuration service - keyed singleton documents in system_settings

Holds the runtime configuration admins edit from the dashboard:
- email_config: provider, credentials, sender details, templates
- stripe_config: checkout keys and currency

Secrets are Fernet-encrypted at rest and never returned unmasked by the
*_view functions.
"""
import logging
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from app.models.system_setting import SystemSetting
from app.utils.encryption import encrypt, decrypt

logger = logging.getLogger(__name__)

EMAIL_CONFIG_KEY = "email_config"
STRIPE_CONFIG_KEY = "stripe_config"

MASKED_VALUE = "••••••••"

EMAIL_SECRET_FIELDS = ("api_key", "smtp_password")
STRIPE_SECRET_FIELDS = ("secret_key", "webhook_secret")

DEFAULT_EMAIL_CONFIG = {
    "provider": "resend",
    "api_key": None,
    "smtp_host": None,
    "smtp_port": 587,
    "smtp_user": None,
    "smtp_password": None,
    "smtp_secure": False,
    "from_email": "",
    "from_name": "",
    "reply_to": "",
    "enable_auto_send": True,
    "enable_retry": False,
    "max_retries": 3,
    "retry_delay": 300,
    "test_mode": False,
    "test_email": None,
    "templates": {},
}

DEFAULT_STRIPE_CONFIG = {
    "enabled": False,
    "publishable_key": "",
    "secret_key": None,
    "webhook_secret": None,
    "currency": "usd",
}


def get_config(key: str, db: Session) -> Optional[Dict[str, Any]]:
    """Load the stored document for key, None if it was never saved"""
    setting = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if not setting:
        return None
    return dict(setting.value or {})


def set_config(key: str, values: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Merge values into the stored document for key (upsert)"""
    setting = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if setting:
        # New dict so the JSON column change is detected
        setting.value = {**(setting.value or {}), **values}
    else:
        setting = SystemSetting(key=key, value=dict(values))
        db.add(setting)
    db.commit()
    db.refresh(setting)
    logger.info(f"Saved configuration '{key}' ({', '.join(sorted(values))})")
    return dict(setting.value)


def _encrypt_secrets(updates: Dict[str, Any], secret_fields) -> Dict[str, Any]:
    """Encrypt secret fields; masked or missing secrets keep the stored value"""
    prepared = dict(updates)
    for field in secret_fields:
        if field not in prepared:
            continue
        value = prepared[field]
        if value is None or value == MASKED_VALUE:
            del prepared[field]
        else:
            prepared[field] = encrypt(value)
    return prepared


def _decrypt_secrets(document: Dict[str, Any], secret_fields) -> Dict[str, Any]:
    for field in secret_fields:
        value = document.get(field)
        if not value:
            document[field] = None
            continue
        try:
            document[field] = decrypt(value)
        except ValueError:
            logger.error(f"Could not decrypt '{field}', was ENCRYPTION_KEY rotated?")
            document[field] = None
    return document


def _mask_secrets(document: Dict[str, Any], secret_fields) -> Dict[str, Any]:
    masked = dict(document)
    for field in secret_fields:
        masked[field] = MASKED_VALUE if masked.get(field) else None
    return masked


# ============================================================================
# EMAIL CONFIG
# ============================================================================

def get_email_config(db: Session) -> Optional[Dict[str, Any]]:
    """Email configuration with secrets decrypted, None if not configured"""
    stored = get_config(EMAIL_CONFIG_KEY, db)
    if stored is None:
        return None
    return _decrypt_secrets({**DEFAULT_EMAIL_CONFIG, **stored}, EMAIL_SECRET_FIELDS)


def save_email_config(updates: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Merge updates into the email configuration, returns the masked view"""
    prepared = _encrypt_secrets(updates, EMAIL_SECRET_FIELDS)
    stored = get_config(EMAIL_CONFIG_KEY, db)
    if "templates" in prepared:
        # Templates merge per resource type
        existing = (stored or {}).get("templates") or {}
        prepared["templates"] = {**existing, **(prepared["templates"] or {})}
    if stored is None:
        prepared = {**DEFAULT_EMAIL_CONFIG, **prepared}
    set_config(EMAIL_CONFIG_KEY, prepared, db)
    return get_email_config_view(db)


def get_email_config_view(db: Session) -> Optional[Dict[str, Any]]:
    """Email configuration for admin display (secrets masked)"""
    config = get_email_config(db)
    if config is None:
        return None
    return _mask_secrets(config, EMAIL_SECRET_FIELDS)


# ============================================================================
# STRIPE CONFIG
# ============================================================================

def get_stripe_config(db: Session) -> Optional[Dict[str, Any]]:
    """Stripe configuration with secrets decrypted, None if not configured"""
    stored = get_config(STRIPE_CONFIG_KEY, db)
    if stored is None:
        return None
    return _decrypt_secrets({**DEFAULT_STRIPE_CONFIG, **stored}, STRIPE_SECRET_FIELDS)


def save_stripe_config(updates: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Merge updates into the Stripe configuration, returns the masked view"""
    prepared = _encrypt_secrets(updates, STRIPE_SECRET_FIELDS)
    if prepared.get("currency"):
        prepared["currency"] = prepared["currency"].lower()
    if get_config(STRIPE_CONFIG_KEY, db) is None:
        prepared = {**DEFAULT_STRIPE_CONFIG, **prepared}
    set_config(STRIPE_CONFIG_KEY, prepared, db)
    return get_stripe_config_view(db)


def get_stripe_config_view(db: Session) -> Optional[Dict[str, Any]]:
    """Stripe configuration for admin display (secrets masked)"""
    config = get_stripe_config(db)
    if config is None:
        return None
    return _mask_secrets(config, STRIPE_SECRET_FIELDS)
