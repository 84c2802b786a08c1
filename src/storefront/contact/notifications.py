"""Emails sent when a contact message arrives.

Delivery is best effort: failures are logged and never surface to the
person who filled in the form.
"""

import structlog

logger = structlog.get_logger(__name__)


def admin_notification(contact) -> dict:
    lines = [
        "New contact form submission",
        "",
        f"Name: {contact.name}",
        f"Email: {contact.email}",
    ]
    if contact.phone:
        lines.append(f"Phone: {contact.phone}")
    if contact.company:
        lines.append(f"Company: {contact.company}")
    lines += [f"Subject: {contact.subject}", "", contact.message]

    return {
        "subject": f"New Contact Form Submission: {contact.subject}",
        "body": "\n".join(lines),
        "reply_to": contact.email,
    }


def user_confirmation(contact) -> dict:
    body = (
        f"Hi {contact.name},\n\n"
        "Thank you for contacting us. We have received your message and will get back "
        "to you within 24 hours.\n\n"
        f"Your message:\nSubject: {contact.subject}\n\n{contact.message}\n\n"
        "Best regards,\nThe Ceylon Software Hub team"
    )
    return {"subject": "Thank you for contacting Ceylon Software Hub", "body": body}


async def _deliver(mailer, to, email):
    try:
        result = await mailer.send(
            to=to,
            subject=email["subject"],
            body=email["body"],
            reply_to=email.get("reply_to"),
        )
    except Exception as exc:
        logger.warning("contact_email_failed", to=to, error=str(exc))
        return False

    if result.get("status") != "sent":
        logger.warning("contact_email_failed", to=to, error=result.get("error"))
        return False
    return True


async def send_contact_emails(mailer, contact, admin_email) -> dict:
    """Notify the admin and confirm receipt to the sender."""
    return {
        "admin": await _deliver(mailer, admin_email, admin_notification(contact)),
        "user": await _deliver(mailer, contact.email, user_confirmation(contact)),
    }
