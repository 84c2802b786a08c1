import pytest
from protean.exceptions import ValidationError
from storefront.contact.message import ContactMessage, ContactMessageReceived


def _submit(**overrides):
    values = {
        "name": "Kasun Silva",
        "email": "Kasun@Example.com",
        "subject": "Volume licensing",
        "message": "Do you offer discounts for 50 seats?",
    }
    values.update(overrides)
    return ContactMessage.submit(**values)


def test_submit_normalizes_and_trims():
    contact = _submit(name="  Kasun Silva ", subject=" Volume licensing ")
    assert contact.name == "Kasun Silva"
    assert contact.subject == "Volume licensing"
    assert contact.email == "kasun@example.com"
    assert contact.submitted_at is not None


def test_optional_fields():
    contact = _submit(phone="0771234567", company="Acme Ltd")
    assert contact.phone == "0771234567"
    assert contact.company == "Acme Ltd"


def test_raises_contact_message_received():
    contact = _submit()
    event = contact._events[0]
    assert isinstance(event, ContactMessageReceived)
    assert event.subject == "Volume licensing"


@pytest.mark.parametrize("field", ["name", "email", "subject", "message"])
def test_required_fields(field):
    with pytest.raises(ValidationError) as exc:
        _submit(**{field: "  "})
    assert exc.value.messages[field] == ["This field is required"]


def test_all_missing_fields_are_reported():
    with pytest.raises(ValidationError) as exc:
        ContactMessage.submit(name=None, email=None, subject=None, message=None)
    assert set(exc.value.messages) == {"name", "email", "subject", "message"}


def test_invalid_email():
    with pytest.raises(ValidationError) as exc:
        _submit(email="kasun-at-example")
    assert exc.value.messages["email"] == ["Invalid email format"]
