"""
Landing-page demo requests (lead emails).

Covers:
  Rendering:
  - subject names the company
  - user input is HTML-escaped in the HTML body
  - plain-text body carries the raw values
  - reply button points at the lead's address

  Endpoint:
  - valid lead delivered to the configured inbox with reply-to set
  - missing fields and invalid email rejected with 400
  - unconfigured recipient is a 500
  - provider failure is a 502
"""

from menucup.routers import landing
from menucup.services.email import Lead, render_lead_email

LEAD_FORM = {
    "fullName": "Jane <b>Doe</b>",
    "email": "jane@example.com",
    "companyName": "Joe & Co",
}


class TestRenderLeadEmail:
    def test_subject(self):
        subject, _, _ = render_lead_email(Lead("Jane", "jane@example.com", "Joe's Bar"))
        assert subject == "🚀 New Lead: Joe's Bar"

    def test_html_escaped(self):
        _, html, _ = render_lead_email(Lead("<script>x</script>", "jane@example.com", "Joe & Co"))
        assert "<script>" not in html
        assert "&lt;script&gt;x&lt;/script&gt;" in html
        assert "Joe &amp; Co" in html

    def test_text_body(self):
        _, _, text = render_lead_email(Lead("Jane Doe", "jane@example.com", "Joe & Co"))
        assert "Restaurant: Joe & Co" in text
        assert "Contact Name: Jane Doe" in text
        assert "Email: jane@example.com" in text

    def test_reply_button(self):
        _, html, _ = render_lead_email(Lead("Jane", "jane@example.com", "Joe"))
        assert 'href="mailto:jane@example.com"' in html
        assert "Reply to Lead" in html


class TestContactEndpoint:
    async def test_delivered(self, client, email_service):
        response = await client.post("/contact", data=LEAD_FORM)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert len(email_service.outbox) == 1
        message = email_service.outbox[0]
        assert message.to_email == "sales@menucup.test"
        assert message.reply_to == "jane@example.com"
        assert message.subject == "🚀 New Lead: Joe & Co"
        assert "Jane &lt;b&gt;Doe&lt;/b&gt;" in message.body_html

    async def test_missing_fields(self, client, email_service):
        response = await client.post("/contact", data={"email": "jane@example.com"})
        assert response.status_code == 400
        assert response.json() == {"success": False}
        assert email_service.outbox == []

    async def test_invalid_email(self, client, email_service):
        response = await client.post("/contact", data={**LEAD_FORM, "email": "not-an-email"})
        assert response.status_code == 400
        assert email_service.outbox == []

    async def test_no_recipient(self, client, email_service, monkeypatch):
        monkeypatch.setattr(landing.settings, "leads_recipient", "")
        response = await client.post("/contact", data=LEAD_FORM)
        assert response.status_code == 500
        assert response.json() == {"success": False}

    async def test_provider_failure(self, client, email_service):
        email_service.failure_rate = 1.0
        response = await client.post("/contact", data=LEAD_FORM)
        assert response.status_code == 502
        assert response.json() == {"success": False}
