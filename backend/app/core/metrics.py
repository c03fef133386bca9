"""Prometheus metrics for the application"""
from prometheus_client import Counter, REGISTRY


def _counter(name: str, documentation: str, labelnames=()):
    # Re-importing the module (tests, reloads) must not register twice
    try:
        return Counter(name, documentation, labelnames)
    except ValueError:
        return REGISTRY._names_to_collectors.get(name)


# Auth metrics
login_attempts_counter = _counter(
    'content_admin_login_attempts_total',
    'Total number of admin login attempts',
    ['status']
)

# Lead capture metrics
downloads_tracked_counter = _counter(
    'content_admin_downloads_tracked_total',
    'Total number of tracked resource downloads',
    ['resource_type']
)

# Email metrics
emails_sent_counter = _counter(
    'content_admin_emails_sent_total',
    'Total number of email send attempts',
    ['provider', 'status']
)

# Payment metrics
payments_counter = _counter(
    'content_admin_payments_total',
    'Payment status transitions',
    ['status']
)
