"""Unit tests for the SMS, Email and Push channels and the channel factory."""

import pytest

from infrastructure.notifications.channels import (
    CHANNEL_CATALOG,
    DELIVERY_ERROR,
    INVALID_MESSAGE,
    MISSING_EMAIL,
    MISSING_PHONE,
    EmailChannel,
    PushChannel,
    SMSChannel,
    create_channel,
    get_available_channels,
    select_channels_for_user,
)
from infrastructure.notifications.errors import InvalidChannelError
from infrastructure.notifications.models import DeliveryStatus


@pytest.mark.unit
class TestValidateRecipient:
    """Tests for per-channel recipient eligibility."""

    def test_sms_requires_phone(self, recipient_factory):
        """SMS rejects a recipient without a phone number."""
        result = SMSChannel().validate_recipient(recipient_factory(phone=None))

        assert not result.is_success
        assert result.error_code == MISSING_PHONE

    def test_sms_rejects_blank_phone(self, recipient_factory):
        """Whitespace-only phone numbers count as missing."""
        result = SMSChannel().validate_recipient(recipient_factory(phone="   "))

        assert result.error_code == MISSING_PHONE

    def test_sms_accepts_phone(self, recipient_factory):
        result = SMSChannel().validate_recipient(recipient_factory(phone="+15551234"))

        assert result.is_success
        assert result.data == {"destination": "+15551234"}

    def test_email_requires_email(self, recipient_factory):
        result = EmailChannel().validate_recipient(recipient_factory(email=None))

        assert not result.is_success
        assert result.error_code == MISSING_EMAIL

    def test_email_accepts_email(self, recipient_factory):
        result = EmailChannel().validate_recipient(recipient_factory(email="a@example.com"))

        assert result.data == {"destination": "a@example.com"}

    def test_push_accepts_anyone(self, recipient_factory):
        """Push has no contact requirements."""
        result = PushChannel().validate_recipient(recipient_factory(email=None, phone=None))

        assert result.is_success


@pytest.mark.unit
class TestSend:
    """Tests for NotificationChannel.send()."""

    def test_sms_success_outcome(self, recipient_factory, message_factory, fixed_clock):
        """A successful send carries destination and content, no error."""
        recipient = recipient_factory(phone="+15551234")
        outcome = SMSChannel(clock=fixed_clock).send(recipient, message_factory())

        assert outcome.status == DeliveryStatus.SENT
        assert outcome.is_success
        assert outcome.channel == "SMS"
        assert outcome.user_id == recipient.id
        assert outcome.category == "Finance"
        assert outcome.destination == "+15551234"
        assert outcome.content == "Rates are up"
        assert outcome.error is None
        assert outcome.timestamp == fixed_clock()

    def test_sms_without_phone_is_failed_outcome(self, recipient_factory, message_factory):
        """Missing phone becomes a failed outcome, not an exception."""
        outcome = SMSChannel().send(recipient_factory(phone=None), message_factory())

        assert outcome.status == DeliveryStatus.FAILED
        assert outcome.error_code == MISSING_PHONE
        assert "phone" in outcome.error.lower()
        assert outcome.destination is None
        assert outcome.content is None

    def test_email_without_email_is_failed_outcome(self, recipient_factory, message_factory):
        outcome = EmailChannel().send(recipient_factory(email=None), message_factory())

        assert outcome.status == DeliveryStatus.FAILED
        assert outcome.error_code == MISSING_EMAIL

    def test_push_success_has_no_destination(self, recipient_factory, message_factory):
        outcome = PushChannel().send(recipient_factory(), message_factory())

        assert outcome.status == DeliveryStatus.SENT
        assert outcome.destination is None

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_empty_content_is_failed_outcome(self, recipient_factory, message_factory, content):
        outcome = EmailChannel().send(recipient_factory(), message_factory(content=content))

        assert outcome.status == DeliveryStatus.FAILED
        assert outcome.error_code == INVALID_MESSAGE
        assert outcome.error == "Message content cannot be empty"

    def test_missing_category_is_failed_outcome(self, recipient_factory, message_factory):
        outcome = PushChannel().send(recipient_factory(), message_factory(category=None))

        assert outcome.status == DeliveryStatus.FAILED
        assert outcome.error == "Message category is required"

    def test_message_checked_before_recipient(self, recipient_factory, message_factory):
        """An empty message is reported even when the recipient is also ineligible."""
        outcome = SMSChannel().send(recipient_factory(phone=None), message_factory(content=""))

        assert outcome.error_code == INVALID_MESSAGE

    def test_delivery_exception_becomes_outcome(
        self, recipient_factory, message_factory, monkeypatch
    ):
        """Errors raised by the transport are captured as DELIVERY_ERROR."""
        channel = EmailChannel()

        def _boom(*args, **kwargs):
            raise RuntimeError("mail relay down")

        monkeypatch.setattr(channel, "_deliver", _boom)

        outcome = channel.send(recipient_factory(), message_factory())

        assert outcome.status == DeliveryStatus.FAILED
        assert outcome.error_code == DELIVERY_ERROR
        assert outcome.error == "mail relay down"

    def test_send_is_deterministic_with_fixed_clock(
        self, recipient_factory, message_factory, fixed_clock
    ):
        channel = SMSChannel(clock=fixed_clock)
        first = channel.send(recipient_factory(), message_factory())
        second = channel.send(recipient_factory(), message_factory())

        assert first == second


@pytest.mark.unit
class TestChannelFactory:
    """Tests for create_channel and channel selection."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("SMS", SMSChannel),
            ("sms", SMSChannel),
            ("Email", EmailChannel),
            ("EMAIL", EmailChannel),
            ("push", PushChannel),
        ],
    )
    def test_create_channel_case_insensitive(self, name, expected):
        assert isinstance(create_channel(name), expected)

    def test_create_channel_unknown_raises(self):
        with pytest.raises(InvalidChannelError) as exc_info:
            create_channel("Fax")

        assert exc_info.value.error_type == "invalid_channel"
        assert "Fax" in exc_info.value.message

    def test_catalog_order(self):
        assert CHANNEL_CATALOG == ("SMS", "Email", "Push")
        assert get_available_channels() == ["SMS", "Email", "Push"]

    def test_channel_names_match_catalog(self):
        assert [create_channel(n).channel_name for n in CHANNEL_CATALOG] == list(
            CHANNEL_CATALOG
        )

    def test_select_channels_for_user_filters_ineligible(self, recipient_factory):
        """Only channels able to reach the recipient are returned."""
        recipient = recipient_factory(phone=None)

        channels = select_channels_for_user(recipient, ["SMS", "Email", "Push"])

        assert [c.channel_name for c in channels] == ["Email", "Push"]

    def test_select_channels_for_user_unknown_name(self, recipient_factory):
        with pytest.raises(InvalidChannelError):
            select_channels_for_user(recipient_factory(), ["Pager"])
