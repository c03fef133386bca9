"""Background dispatcher for download delivery emails

Runs each delivery in a worker thread with its own DB session so the
request that recorded the download returns without waiting for the email
provider. There is no persistence: a delivery queued when the process dies
is lost and stays "pending" until an admin retries it.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional, Set

from app.core.config import settings
from app.db.session import SessionLocal

logger = logging.getLogger(__name__)
email_logger = logging.getLogger("email")

_executor: Optional[ThreadPoolExecutor] = None
_pending: Set[Future] = set()
_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.EMAIL_DISPATCH_WORKERS,
                thread_name_prefix="email-dispatch"
            )
        return _executor


def process_download_email(download_id: int) -> None:
    """Deliver the email for one download (runs in a worker thread)"""
    from app.services.download_service import deliver_download_email

    db = SessionLocal()
    try:
        email_logger.info(f"Sending delivery email for download {download_id}")
        deliver_download_email(download_id, db)
    except Exception as e:
        # deliver_download_email records its own failures, this only guards the worker
        logger.error(f"Email worker crashed on download {download_id}: {e}", exc_info=True)
    finally:
        db.close()


def _forget(future: Future) -> None:
    with _lock:
        _pending.discard(future)


def dispatch_download_email(download_id: int) -> Future:
    """Queue the delivery email for a download and return immediately"""
    future = _get_executor().submit(process_download_email, download_id)
    with _lock:
        _pending.add(future)
    future.add_done_callback(_forget)
    return future


def wait_for_pending(timeout: Optional[float] = None) -> None:
    """Block until every queued delivery has finished"""
    with _lock:
        futures = list(_pending)
    if futures:
        wait(futures, timeout=timeout)


def shutdown_dispatcher(timeout: Optional[float] = 30.0) -> None:
    """Drain queued deliveries and stop the worker threads"""
    global _executor
    wait_for_pending(timeout=timeout)
    with _lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=True)
        logger.info("Email dispatcher stopped")
