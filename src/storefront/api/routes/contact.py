"""Public contact form and the admin view of submissions."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import get_principal, get_services, require_admin
from storefront.api.schemas import (
    ContactMessageResponse,
    ContactRequest,
    ContactResponse,
    ContactSubmissionsResponse,
)
from storefront.auth.principal import Principal
from storefront.contact.message import ContactMessage, SubmitContactMessage
from storefront.contact.notifications import send_contact_emails
from storefront.services import Services
from storefront.shared.pagination import DEFAULT_LIMIT, paginate
from storefront.shared.records import fetch_all

contact_router = APIRouter(prefix="/contact", tags=["contact"])


@contact_router.post("", response_model=ContactResponse)
async def submit_contact_form(
    body: ContactRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> ContactResponse:
    command = SubmitContactMessage(
        name=body.name,
        email=body.email,
        phone=body.phone,
        company=body.company,
        subject=body.subject,
        message=body.message,
        user_id=principal.user_id,
    )
    message_id = current_domain.process(command, asynchronous=False)
    contact = current_domain.repository_for(ContactMessage).get(message_id)

    await send_contact_emails(services.mailer, contact, services.settings.admin_email)
    return ContactResponse(message="Message sent successfully! We will get back to you soon.", success=True)


@contact_router.get(
    "/submissions",
    response_model=ContactSubmissionsResponse,
    dependencies=[Depends(require_admin)],
)
async def list_submissions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
) -> ContactSubmissionsResponse:
    messages = fetch_all(current_domain.repository_for(ContactMessage)._dao.query)
    messages.sort(key=lambda contact: contact.submitted_at, reverse=True)
    result = paginate(messages, page, limit)
    return ContactSubmissionsResponse(
        submissions=[ContactMessageResponse.from_message(contact) for contact in result.items],
        **ContactSubmissionsResponse.fields_from(result),
    )
