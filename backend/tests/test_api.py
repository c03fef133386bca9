"""HTTP-level tests for the public and admin APIs"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.models import Download, EmailLog, Payment, Whitepaper
from app.tasks.email_dispatch import wait_for_pending

LEAD = {"email": "lead@example.com", "name": "Lee Lead", "company": "Acme Pharma", "job_title": "QA Manager"}


@pytest.mark.critical
class TestWhitepaperLeadFlow:
    """Public whitepaper page -> download form -> background email -> admin view"""

    @patch("resend.Emails.send", return_value={"id": "re_e2e"})
    def test_download_is_delivered_in_background(self, mock_send, client, db_session, whitepaper, email_config):
        page = client.get("/api/public/whitepapers/risk-management-101")
        assert page.status_code == 200
        assert "pdf_url" not in page.json()["whitepaper"]

        response = client.post(f"/api/public/whitepapers/{whitepaper.id}/download", json=LEAD)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["pdfUrl"] == "https://cdn.example.com/risk-management-101.pdf"

        wait_for_pending(timeout=10)
        db_session.expire_all()

        download = db_session.get(Download, body["downloadId"])
        assert download.email_status == "delivered"
        assert download.email_sent is True
        assert download.email_id == "re_e2e"
        assert db_session.query(EmailLog).filter(EmailLog.download_id == str(download.id)).count() == 1
        assert db_session.get(Whitepaper, whitepaper.id).downloads == 1
        assert mock_send.call_args[0][0]["to"] == "lead@example.com"

    @patch("resend.Emails.send", side_effect=Exception("Resend is down"))
    def test_email_failure_does_not_fail_download(self, mock_send, client, db_session, whitepaper, email_config):
        response = client.post(f"/api/public/whitepapers/{whitepaper.id}/download", json=LEAD)
        assert response.status_code == 200
        assert response.json()["success"] is True

        wait_for_pending(timeout=10)
        db_session.expire_all()

        download = db_session.get(Download, response.json()["downloadId"])
        assert download.email_status == "failed"
        assert download.email_error == "Resend is down"

    def test_unknown_whitepaper(self, client):
        response = client.post("/api/public/whitepapers/999/download", json=LEAD)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Whitepaper not found"}

    def test_invalid_email_rejected(self, client, whitepaper):
        response = client.post(f"/api/public/whitepapers/{whitepaper.id}/download", json={"email": "nope", "name": "X"})
        assert response.status_code == 422

    def test_draft_whitepaper_page_is_hidden(self, client, db_session, whitepaper):
        whitepaper.status = "draft"
        db_session.commit()
        assert client.get("/api/public/whitepapers/risk-management-101").status_code == 404

    def test_generic_download_capture(self, client, db_session):
        response = client.post("/api/public/downloads", json={
            "resource_type": "guide",
            "resource_id": "g-1",
            "resource_title": "Audit Guide",
            "resource_url": "https://cdn.example.com/audit-guide.pdf",
            "user_email": "lead@example.com",
            "user_name": "Lee Lead",
        }, headers={"User-Agent": "pytest-agent"})
        assert response.status_code == 200
        download = db_session.get(Download, response.json()["downloadId"])
        assert download.resource_type == "guide"
        assert download.user_agent == "pytest-agent"


@pytest.mark.critical
class TestDownloadAdminEndpoints:

    @patch("app.services.download_service.dispatch_download_email")
    def test_list_stats_and_follow_up(self, mock_dispatch, authenticated_client, whitepaper):
        created = authenticated_client.post(f"/api/public/whitepapers/{whitepaper.id}/download", json=LEAD).json()

        listing = authenticated_client.get("/api/downloads", params={"search": "acme"}).json()
        assert [d["id"] for d in listing["downloads"]] == [created["downloadId"]]

        stats = authenticated_client.get("/api/downloads/stats").json()
        assert stats["total"] == 1
        assert stats["by_status"] == {"pending": 1}

        patched = authenticated_client.patch(
            f"/api/downloads/{created['downloadId']}/follow-up",
            json={"follow_up_status": "contacted", "follow_up_notes": "Left voicemail"},
        )
        assert patched.json()["download"]["follow_up_status"] == "contacted"

    @patch("app.services.download_service.dispatch_download_email")
    def test_csv_export(self, mock_dispatch, authenticated_client, whitepaper):
        authenticated_client.post(f"/api/public/whitepapers/{whitepaper.id}/download", json=LEAD)

        response = authenticated_client.get("/api/downloads/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"].startswith('attachment; filename="downloads-export-')
        lines = response.text.split("\n")
        assert lines[0].startswith("Date,Resource Type,Resource Title")
        assert '"Lee Lead","lead@example.com","Acme Pharma","QA Manager"' in lines[1]

    def test_retry_on_delivered_download_conflicts(self, authenticated_client, db_session):
        download = Download(
            resource_type="whitepaper", resource_id="1", resource_title="T",
            resource_url="https://x/t.pdf", user_email="lead@example.com", user_name="Lee",
            email_status="delivered", email_sent=True,
        )
        db_session.add(download)
        db_session.commit()

        response = authenticated_client.post(f"/api/downloads/{download.id}/retry-email")
        assert response.status_code == 409
        assert response.json()["error"] == "Email already delivered"

    def test_retry_unknown_download(self, authenticated_client):
        response = authenticated_client.post("/api/downloads/999/retry-email")
        assert response.status_code == 404
        assert response.json()["error"] == "Download record not found"

    def test_admin_endpoints_need_session(self, client):
        for path in ("/api/downloads", "/api/downloads/stats", "/api/payments", "/api/blogs"):
            assert client.get(path).status_code == 401


@pytest.mark.critical
class TestCheckoutEndpoints:

    @patch("stripe.checkout.Session.create")
    def test_checkout(self, mock_create, client, db_session, stripe_config, training):
        mock_create.return_value = SimpleNamespace(id="cs_api_1", url="https://checkout.stripe.com/c/pay/cs_api_1")

        response = client.post("/api/public/checkout", json={
            "training_id": training.id,
            "user_email": "buyer@example.com",
            "user_name": "Bea Buyer",
            "success_url": "https://example.com/thanks?session_id={CHECKOUT_SESSION_ID}",
            "cancel_url": "https://example.com/cancel",
        })

        assert response.status_code == 200
        assert response.json() == {"success": True, "sessionId": "cs_api_1", "url": "https://checkout.stripe.com/c/pay/cs_api_1"}
        assert db_session.query(Payment).one().payment_status == "pending"

    def test_checkout_requires_session_placeholder(self, client, training):
        response = client.post("/api/public/checkout", json={
            "training_id": training.id,
            "user_email": "buyer@example.com",
            "user_name": "Bea Buyer",
            "success_url": "https://example.com/thanks",
            "cancel_url": "https://example.com/cancel",
        })
        assert response.status_code == 422

    def test_checkout_without_stripe_config(self, client, training):
        response = client.post("/api/public/checkout", json={
            "training_id": training.id,
            "user_email": "buyer@example.com",
            "user_name": "Bea Buyer",
            "success_url": "https://example.com/thanks?session_id={CHECKOUT_SESSION_ID}",
            "cancel_url": "https://example.com/cancel",
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Stripe not configured"

    @patch("stripe.checkout.Session.retrieve")
    def test_complete_payment(self, mock_retrieve, client, db_session, stripe_config, training):
        payment = Payment(
            training_id=training.id, training_title=training.title, amount=149.0, final_amount=149.0,
            user_email="buyer@example.com", user_name="Bea Buyer", session_id="cs_api_2",
        )
        db_session.add(payment)
        db_session.commit()
        mock_retrieve.return_value = SimpleNamespace(
            id="cs_api_2", payment_status="paid", payment_intent="pi_api", amount_total=14900, currency="usd"
        )

        response = client.post("/api/public/payments/complete", params={"session_id": "cs_api_2"})

        assert response.json() == {"success": True, "paymentStatus": "paid"}
        db_session.refresh(payment)
        assert payment.payment_status == "completed"

    @patch("stripe.Refund.create")
    def test_refund_pending_payment_conflicts(self, mock_refund, authenticated_client, db_session, stripe_config, training):
        payment = Payment(
            training_id=training.id, training_title=training.title, amount=149.0, final_amount=149.0,
            user_email="buyer@example.com", user_name="Bea Buyer", session_id="cs_api_3",
        )
        db_session.add(payment)
        db_session.commit()

        response = authenticated_client.post(f"/api/payments/{payment.id}/refund")

        assert response.status_code == 409
        assert response.json()["error"] == "Can only refund completed payments"
        mock_refund.assert_not_called()

    @patch("stripe.Refund.create")
    def test_partial_refund(self, mock_refund, authenticated_client, db_session, stripe_config, training):
        payment = Payment(
            training_id=training.id, training_title=training.title, amount=149.0, final_amount=149.0,
            user_email="buyer@example.com", user_name="Bea Buyer", session_id="cs_api_4",
            payment_status="completed", payment_intent_id="pi_api_4",
        )
        db_session.add(payment)
        db_session.commit()
        mock_refund.return_value = MagicMock(id="re_api", status="succeeded", amount=2500)

        response = authenticated_client.post(f"/api/payments/{payment.id}/refund", json={"amount": 25})

        assert response.status_code == 200
        assert mock_refund.call_args[1]["amount"] == 2500
        db_session.refresh(payment)
        assert payment.payment_status == "refunded"


@pytest.mark.medium
class TestServiceEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_metrics(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "content_admin_login_attempts" in response.text

    def test_dashboard_summary(self, authenticated_client, whitepaper, training):
        response = authenticated_client.get("/admin/dashboard")
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "admin@example.com"
        assert body["content"]["whitepapers"] == 1
        assert body["content"]["trainings"] == 1
        assert body["content"]["speakers"] == 1
        assert body["downloads"]["total"] == 0
