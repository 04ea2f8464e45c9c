# =============================================================================
# core/services/notification_service.py - Registration Emails
# =============================================================================
# Two emails go out after a supplier is saved:
# - an internal notice with the full submission, to the team
# - a confirmation to the address the supplier registered with
#
# Both bodies are jinja2 templates rendered with autoescaping, so every
# user-supplied value is HTML-escaped. Send failures are logged and
# reported as False; they never fail a submission that is already
# persisted.
# =============================================================================

import logging
from typing import Any, Protocol

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from app.exceptions import NotificationError
from core.models.supplier import DriveLinkCatalog, SupplierSubmission, TextCatalog
from core.services.supplier_service import UploadedFiles

logger = logging.getLogger(__name__)

INTERNAL = "internal"
SUBMITTER = "submitter"


class Notifier(Protocol):
    """Transactional email provider."""

    def send(self, sender: str, to: list[str], subject: str, html: str) -> Any:
        ...


# =============================================================================
# Templates
# =============================================================================
# Rendered by jinja2 with autoescaping on: every submitted value is escaped
# on output, including URLs placed in href attributes.

_TEMPLATES = {
    "internal_notice.html": """\
<div dir="rtl">
<h1>ספק חדש נרשם להספקיה</h1>
<h2>פרטי העסק:</h2>
<ul>
  <li><strong>שם העסק:</strong> {{ submission.business_name }}</li>
{% if submission.company_id %}
  <li><strong>ח.פ / עוסק מורשה:</strong> {{ submission.company_id }}</li>
{% endif %}
  <li><strong>שם איש קשר:</strong> {{ submission.contact_name }}</li>
  <li><strong>טלפון:</strong> {{ submission.phone }}</li>
  <li><strong>אימייל:</strong> {{ submission.email }}</li>
  <li><strong>קטגוריות:</strong> {{ submission.categories | join(", ") }}</li>
  <li><strong>אזורי פעילות:</strong> {{ submission.activity_areas | join(", ") }}</li>
{% if submission.website %}
  <li><strong>אתר:</strong> {{ submission.website }}</li>
{% endif %}
{% if submission.instagram %}
  <li><strong>אינסטגרם:</strong> {{ submission.instagram }}</li>
{% endif %}
  <li><strong>כתובת מרכזית:</strong> {{ submission.main_address }}</li>
</ul>
<h2>אודות העסק:</h2>
<p>{{ submission.about }}</p>
{% if uploads.logo_url %}
<p><strong>לוגו:</strong> <a href="{{ uploads.logo_url }}">צפה בלוגו</a></p>
{% endif %}
{% for url in uploads.product_image_urls %}
<p><strong>תמונת מוצר {{ loop.index }}:</strong> <a href="{{ url }}">צפה בתמונה</a></p>
{% endfor %}
{% if catalog_text %}
<h2>קטלוג מוצרים:</h2>
<p>{{ catalog_text }}</p>
{% elif catalog_link %}
<p><strong>קטלוג מוצרים:</strong> <a href="{{ catalog_link }}">פתח קישור</a></p>
{% elif uploads.catalog_url %}
<p><strong>קטלוג מוצרים:</strong> <a href="{{ uploads.catalog_url }}">צפה בקטלוג</a></p>
{% endif %}
</div>
""",
    "confirmation.html": """\
<div dir="rtl">
<h1>תודה שנרשמת להספקיה, {{ submission.contact_name }}!</h1>
<p>קיבלנו את פרטי העסק <strong>{{ submission.business_name }}</strong>.</p>
<p>הצוות שלנו יעבור על הפרטים ויחזור אליך בהקדם.</p>
<p>בברכה,<br>צוות הספקיה</p>
</div>
""",
}

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def build_internal_subject(submission: SupplierSubmission) -> str:
    return f"ספק חדש נרשם - {submission.business_name}"


def build_internal_html(submission: SupplierSubmission, uploads: UploadedFiles) -> str:
    """Summary of a new registration for the internal team."""
    catalog = submission.product_catalog
    return _env.get_template("internal_notice.html").render(
        submission=submission,
        uploads=uploads,
        catalog_text=catalog.text if isinstance(catalog, TextCatalog) else None,
        catalog_link=catalog.link if isinstance(catalog, DriveLinkCatalog) else None,
    )


CONFIRMATION_SUBJECT = "קיבלנו את הרשמתך להספקיה"


def build_confirmation_html(submission: SupplierSubmission) -> str:
    """Thank-you message sent to the supplier."""
    return _env.get_template("confirmation.html").render(submission=submission)


# =============================================================================
# Service
# =============================================================================

class NotificationService:
    """
    Sends the registration emails.

    Example:
        service = NotificationService(ResendEmailClient(key), sender, ["ops@example.com"])
        service.notify_internal(submission, uploads)
        service.confirm_submitter(submission)
    """

    def __init__(self, notifier: Notifier, sender: str, internal_recipients: list[str]):
        self.notifier = notifier
        self.sender = sender
        self.internal_recipients = internal_recipients

    def _send(self, recipient_class: str, to: list[str], subject: str, html: str) -> bool:
        try:
            self.notifier.send(self.sender, to, subject, html)
        except Exception as e:
            error = NotificationError(recipient_class, str(e))
            logger.error(error.message)
            return False

        logger.info(f"Sent {recipient_class} email to {len(to)} recipient(s)")
        return True

    def notify_internal(self, submission: SupplierSubmission, uploads: UploadedFiles) -> bool:
        """Email the team about a new supplier. Returns False if it was not sent."""
        if not self.internal_recipients:
            logger.warning("No internal recipients configured; skipping new-supplier notice")
            return False
        return self._send(
            INTERNAL,
            self.internal_recipients,
            build_internal_subject(submission),
            build_internal_html(submission, uploads),
        )

    def confirm_submitter(self, submission: SupplierSubmission) -> bool:
        """Email the supplier a confirmation. Returns False if it was not sent."""
        return self._send(
            SUBMITTER,
            [submission.email],
            CONFIRMATION_SUBJECT,
            build_confirmation_html(submission),
        )
