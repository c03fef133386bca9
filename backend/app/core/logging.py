"""Root log configuration for the content admin backend

Modules log through logging.getLogger(__name__); cross-cutting events go to
the named channels below so they can be routed or filtered on their own.
"""
import logging

from app.core.config import settings

# security: logins, setup, rejected sessions; api_access: one JSON line per
# request; email: provider sends and dispatch; payments: Stripe transitions
CHANNELS = ("security", "api_access", "email", "payments")

QUIET_LIBRARIES = ("stripe", "httpx", "httpcore", "urllib3", "resend")


def setup_logging():
    """Install the root handler once per process (safe to call again)"""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True
    )
    for channel in CHANNELS:
        logging.getLogger(channel).setLevel(level)
    for library in QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.WARNING)
