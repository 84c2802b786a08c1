"""Collaborators built once from settings and handed to the API."""

from dataclasses import dataclass
from datetime import timedelta

from storefront.auth.tokens import TokenService
from storefront.config import Settings
from storefront.gateway import build_gateway
from storefront.gateway.port import PaymentGateway
from storefront.mail import build_mailer
from storefront.mail.email_port import EmailPort
from storefront.storage import build_storage
from storefront.storage.port import ObjectStorage


@dataclass
class Services:
    settings: Settings
    gateway: PaymentGateway
    storage: ObjectStorage
    mailer: EmailPort
    tokens: TokenService


def build_services(settings: Settings) -> Services:
    return Services(
        settings=settings,
        gateway=build_gateway(settings),
        storage=build_storage(settings),
        mailer=build_mailer(settings),
        tokens=TokenService(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiry=timedelta(days=settings.jwt_expiry_days),
        ),
    )
