"""SQLAlchemy models package - imports all models so they register with Base.metadata"""
from app.models.base import Base
from app.models.user import User
from app.models.blog import Blog
from app.models.whitepaper import Whitepaper
from app.models.speaker import Speaker
from app.models.training import Training
from app.models.download import Download
from app.models.email_log import EmailLog
from app.models.payment import Payment
from app.models.system_setting import SystemSetting

# Export all for convenience
__all__ = [
    "Base", "User", "Blog", "Whitepaper", "Speaker", "Training",
    "Download", "EmailLog", "Payment", "SystemSetting"
]
