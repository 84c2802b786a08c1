"""Contact form submissions: aggregate, command and handler."""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.identity.email import normalize_email

_REQUIRED = ("name", "email", "subject", "message")


@storefront.event(part_of="ContactMessage")
class ContactMessageReceived:
    __version__ = 1

    message_id: Identifier(required=True)
    email: String(required=True, max_length=254, sanitize=False)
    subject: String(required=True, max_length=200, sanitize=False)
    received_at: DateTime(required=True)


@storefront.aggregate
class ContactMessage:
    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    phone: String(max_length=30, sanitize=False)
    company: String(max_length=100, sanitize=False)
    subject: String(required=True, max_length=200, sanitize=False)
    message: Text(required=True, sanitize=False)
    user_id: Identifier()
    submitted_at: DateTime()

    @classmethod
    def submit(cls, name, email, subject, message, phone=None, company=None, user_id=None):
        values = {"name": name, "email": email, "subject": subject, "message": message}
        missing = [field for field in _REQUIRED if not (values[field] or "").strip()]
        if missing:
            raise ValidationError({field: ["This field is required"] for field in missing})

        now = datetime.now(UTC)
        contact = cls(
            name=name.strip(),
            email=normalize_email(email),
            phone=phone,
            company=company,
            subject=subject.strip(),
            message=message.strip(),
            user_id=user_id,
            submitted_at=now,
        )
        contact.raise_(
            ContactMessageReceived(
                message_id=str(contact.id),
                email=contact.email,
                subject=contact.subject,
                received_at=now,
            )
        )
        return contact


@storefront.command(part_of="ContactMessage")
class SubmitContactMessage:
    name: String(max_length=100, sanitize=False)
    email: String(max_length=254, sanitize=False)
    phone: String(max_length=30, sanitize=False)
    company: String(max_length=100, sanitize=False)
    subject: String(max_length=200, sanitize=False)
    message: Text(sanitize=False)
    user_id: Identifier()


@storefront.command_handler(part_of=ContactMessage)
class ContactMessageHandler:
    @handle(SubmitContactMessage)
    def submit(self, command):
        contact = ContactMessage.submit(
            name=command.name,
            email=command.email,
            subject=command.subject,
            message=command.message,
            phone=command.phone,
            company=command.company,
            user_id=command.user_id,
        )
        current_domain.repository_for(ContactMessage).add(contact)
        logger.info("contact_message_received", message_id=str(contact.id), subject=contact.subject)
        return str(contact.id)
