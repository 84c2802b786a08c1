"""Email address validation shared by registration and the contact form."""

from protean.exceptions import ValidationError

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def normalize_email(address, field="email"):
    """Return the lower-cased address, or raise ValidationError if it is malformed."""
    email = (address or "").strip().lower()

    def _invalid():
        return ValidationError({field: ["Invalid email format"]})

    if not email or any(ch.isspace() for ch in email):
        raise _invalid()

    if email.count("@") != 1:
        raise _invalid()

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise _invalid()

    if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        raise _invalid()

    for label in domain_part.split("."):
        if not label or label.startswith("-") or label.endswith("-"):
            raise _invalid()

    if ".." in local_part:
        raise _invalid()

    if any(ch in email for ch in _FORBIDDEN):
        raise _invalid()

    return email
