"""Lead capture tests: download tracking, delivery emails and reporting"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import ConflictError, NotFoundError
from app.models import Download, EmailLog
from app.services import download_service
from app.services.email_providers import SendResult

CONTACT = {
    "email": "lead@example.com",
    "name": "Lee Lead",
    "company": "Acme Pharma",
    "job_title": "QA Manager",
}


def make_download(db_session, **overrides):
    data = {
        "resource_type": "whitepaper",
        "resource_id": "1",
        "resource_title": "Risk Management 101",
        "resource_url": "https://cdn.example.com/risk-management-101.pdf",
        "user_email": "lead@example.com",
        "user_name": "Lee Lead",
    }
    data.update(overrides)
    result = download_service.create_download(data, db_session)
    return db_session.get(Download, result["downloadId"])


@pytest.mark.critical
class TestTrackWhitepaperDownload:

    @patch("app.services.download_service.dispatch_download_email")
    def test_records_pending_download_and_returns_pdf(self, mock_dispatch, db_session, whitepaper):
        result = download_service.track_whitepaper_download(
            whitepaper.id, CONTACT, db_session, metadata={"ip_address": "203.0.113.7"}
        )

        assert result["success"] is True
        assert result["pdfUrl"] == "https://cdn.example.com/risk-management-101.pdf"

        download = db_session.get(Download, result["downloadId"])
        assert download.resource_type == "whitepaper"
        assert download.resource_id == str(whitepaper.id)
        assert download.email_status == "pending"
        assert download.email_sent is False
        assert download.follow_up_required is True
        assert download.follow_up_status == "pending"
        assert download.ip_address == "203.0.113.7"
        mock_dispatch.assert_called_once_with(result["downloadId"])

    @patch("app.services.download_service.dispatch_download_email")
    def test_each_download_increments_counter_by_one(self, mock_dispatch, db_session, whitepaper):
        for _ in range(3):
            download_service.track_whitepaper_download(whitepaper.id, CONTACT, db_session)
        db_session.refresh(whitepaper)
        assert whitepaper.downloads == 3
        assert db_session.query(Download).count() == 3

    @patch("app.services.download_service.dispatch_download_email")
    def test_unknown_whitepaper(self, mock_dispatch, db_session):
        with pytest.raises(NotFoundError, match="Whitepaper not found"):
            download_service.track_whitepaper_download(999, CONTACT, db_session)
        assert db_session.query(Download).count() == 0
        mock_dispatch.assert_not_called()

    @patch("app.services.download_service.dispatch_download_email", side_effect=lambda download_id: None)
    def test_success_does_not_wait_for_email(self, mock_dispatch, db_session, whitepaper):
        # No email configuration at all, tracking still succeeds
        result = download_service.track_whitepaper_download(whitepaper.id, CONTACT, db_session)
        assert result["success"] is True
        assert db_session.get(Download, result["downloadId"]).email_status == "pending"


@pytest.mark.critical
class TestDeliverDownloadEmail:

    def test_success_records_delivery(self, db_session):
        download = make_download(db_session)
        sent = SendResult(success=True, message_id="msg_123", provider="resend")

        with patch("app.services.download_service.send_whitepaper_email", return_value=sent):
            result = download_service.deliver_download_email(download.id, db_session)

        assert result == {"success": True, "message_id": "msg_123"}
        db_session.refresh(download)
        assert download.email_sent is True
        assert download.email_status == "delivered"
        assert download.email_sent_at is not None
        assert download.email_id == "msg_123"
        assert download.email_provider == "resend"
        assert download.email_error is None

    def test_failure_records_error(self, db_session):
        download = make_download(db_session)
        failed = SendResult(success=False, error="Email not configured")

        with patch("app.services.download_service.send_whitepaper_email", return_value=failed):
            download_service.deliver_download_email(download.id, db_session)

        db_session.refresh(download)
        assert download.email_sent is False
        assert download.email_status == "failed"
        assert download.email_error == "Email not configured"

    def test_exception_is_recorded_not_raised(self, db_session):
        download = make_download(db_session)

        with patch("app.services.download_service.send_whitepaper_email", side_effect=RuntimeError("provider down")):
            result = download_service.deliver_download_email(download.id, db_session)

        assert result == {"success": False, "error": "provider down"}
        db_session.refresh(download)
        assert download.email_status == "failed"
        assert download.email_error == "provider down"

    @patch("resend.Emails.send", return_value={"id": "re_sent"})
    def test_log_write_failure_keeps_delivered_status(self, mock_send, db_session, email_config):
        download = make_download(db_session)

        with patch("app.services.email_service.EmailLog", side_effect=SQLAlchemyError("disk full")):
            download_service.deliver_download_email(download.id, db_session)

        db_session.refresh(download)
        assert download.email_status == "delivered"
        assert download.email_sent is True
        assert download.email_id == "re_sent"
        assert db_session.query(EmailLog).count() == 0
        with pytest.raises(ConflictError, match="Email already delivered"):
            download_service.retry_email(download.id, db_session)
        mock_send.assert_called_once()

    def test_missing_download_is_ignored(self, db_session):
        assert download_service.deliver_download_email(12345, db_session) is None

    def test_unconfigured_email_fails_without_log(self, db_session):
        download = make_download(db_session)
        download_service.deliver_download_email(download.id, db_session)

        db_session.refresh(download)
        assert download.email_status == "failed"
        assert download.email_error == "Email template not configured"

    @patch("resend.Emails.send", return_value={"id": "re_abc"})
    def test_renders_template_and_logs(self, mock_send, db_session, email_config):
        download = make_download(db_session)
        download_service.deliver_download_email(download.id, db_session)

        params = mock_send.call_args[0][0]
        assert params["to"] == "lead@example.com"
        assert params["subject"] == "Your copy of Risk Management 101"
        assert 'href="https://cdn.example.com/risk-management-101.pdf"' in params["html"]
        assert "Hi Lee Lead" in params["html"]
        assert "Example Learning" in params["html"]

        log = db_session.query(EmailLog).one()
        assert log.download_id == str(download.id)
        assert log.status == "sent"
        assert log.message_id == "re_abc"


@pytest.mark.critical
class TestRetryEmail:

    def test_delivered_download_is_rejected_without_sending(self, db_session):
        download = make_download(db_session)
        download.email_status = "delivered"
        download.email_sent = True
        db_session.commit()

        with patch("app.services.download_service.send_whitepaper_email") as mock_send:
            with pytest.raises(ConflictError, match="Email already delivered"):
                download_service.retry_email(download.id, db_session)
        mock_send.assert_not_called()

    def test_failed_download_is_resent(self, db_session):
        download = make_download(db_session)
        download.email_status = "failed"
        db_session.commit()

        sent = SendResult(success=True, message_id="msg_retry", provider="resend")
        with patch("app.services.download_service.send_whitepaper_email", return_value=sent):
            result = download_service.retry_email(download.id, db_session)

        assert result == {"success": True, "message": "Email retry initiated", "email_status": "delivered"}

    def test_unknown_download(self, db_session):
        with pytest.raises(NotFoundError, match="Download record not found"):
            download_service.retry_email(4040, db_session)


@pytest.mark.medium
class TestDownloadAdmin:

    def test_stats_on_empty_table(self, db_session):
        stats = download_service.get_download_stats(db_session)
        assert stats["total"] == 0
        assert stats["this_week"] == 0
        assert stats["this_month"] == 0
        assert stats["by_resource_type"] == {}
        assert stats["by_status"] == {}
        assert stats["top_resources"] == []
        assert stats["recent_downloads"] == []

    def test_stats_aggregates(self, db_session):
        make_download(db_session)
        make_download(db_session, user_email="b@example.com")
        make_download(db_session, resource_type="guide", resource_id="g1", resource_title="Audit Guide")
        failed = make_download(db_session, resource_type="guide", resource_id="g2", resource_title="Other Guide")
        failed.email_status = "failed"
        db_session.commit()

        stats = download_service.get_download_stats(db_session)
        assert stats["total"] == 4
        assert stats["this_week"] == 4
        assert stats["by_resource_type"] == {"whitepaper": 2, "guide": 2}
        assert stats["by_status"] == {"pending": 3, "failed": 1}
        assert stats["top_resources"][0]["resource_title"] == "Risk Management 101"
        assert stats["top_resources"][0]["count"] == 2
        assert len(stats["recent_downloads"]) == 4

    def test_csv_export_format(self, db_session):
        make_download(db_session, user_name='Ann "The Auditor" Lee', user_company="Acme, Inc.")

        export = download_service.export_downloads_csv(db_session)
        lines = export["csv"].split("\n")

        assert lines[0] == (
            "Date,Resource Type,Resource Title,User Name,User Email,"
            "Company,Job Title,Email Status,Follow-up Status"
        )
        assert len(lines) == 2
        cells = lines[1]
        assert '"Ann ""The Auditor"" Lee"' in cells
        assert '"Acme, Inc."' in cells
        assert cells.endswith('"pending","pending"')
        assert export["filename"].startswith("downloads-export-")
        assert export["filename"].endswith(".csv")

    def test_csv_export_respects_filters(self, db_session):
        make_download(db_session)
        make_download(db_session, resource_type="guide", resource_id="g1", resource_title="Audit Guide")

        export = download_service.export_downloads_csv(db_session, resource_type="guide")
        assert len(export["csv"].split("\n")) == 2
        assert "Audit Guide" in export["csv"]

    def test_list_filters_and_search(self, db_session):
        make_download(db_session, user_company="Acme Pharma")
        make_download(db_session, user_email="other@example.com", user_company="Globex")

        assert len(download_service.list_downloads(db_session)) == 2
        assert len(download_service.list_downloads(db_session, search="globex")) == 1
        assert len(download_service.list_downloads(db_session, email_status="delivered")) == 0

    def test_follow_up_update(self, db_session):
        download = make_download(db_session)
        updated = download_service.update_follow_up(
            download.id, "contacted", db_session, notes="Called Tuesday", assigned_to="sales@example.com"
        )
        assert updated["follow_up_status"] == "contacted"
        assert updated["follow_up_notes"] == "Called Tuesday"
        assert updated["assigned_to"] == "sales@example.com"

    def test_create_download_does_not_queue_email(self, db_session):
        with patch("app.services.download_service.dispatch_download_email") as mock_dispatch:
            download = make_download(db_session, resource_type="datasheet")
        assert download.email_status == "pending"
        assert download.follow_up_required is False
        mock_dispatch.assert_not_called()

    def test_delete(self, db_session):
        download = make_download(db_session)
        download_service.delete_download(download.id, db_session)
        with pytest.raises(NotFoundError):
            download_service.get_download(download.id, db_session)
