"""Email adapter factory."""

from storefront.mail.email_port import EmailPort
from storefront.mail.fake_email import FakeEmailAdapter
from storefront.mail.smtp_adapter import SMTPEmailAdapter


def build_mailer(settings) -> EmailPort:
    """SMTP when credentials are configured, otherwise an in-memory recorder."""
    if settings.mail_enabled:
        return SMTPEmailAdapter(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
        )
    return FakeEmailAdapter()
