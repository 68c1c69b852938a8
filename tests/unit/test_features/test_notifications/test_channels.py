"""Tests for channel senders and routing."""

from __future__ import annotations

import pytest

from notification_dispatcher.features.notifications.channels import (
    EmailSender,
    InAppSender,
    PushMessageOptions,
    PushSender,
    build_push_message,
    parse_channel,
)
from notification_dispatcher.features.notifications.enums import (
    EmailRequestStatus,
    NotificationChannel,
)
from notification_dispatcher.features.notifications.exceptions import (
    ChannelDeliveryError,
    UnsupportedChannelError,
)
from notification_dispatcher.features.notifications.schemas import NotificationPayload
from notification_dispatcher.features.notifications.store import Recipient
from notification_dispatcher.infra.push import PushErrorCode, PushTransportError


@pytest.fixture
def in_app(store):
    return InAppSender(store)


@pytest.fixture
def push(store, transport, in_app):
    return PushSender(store, transport, fallback=in_app)


class TestBuildPushMessage:
    def test_message_shape(self):
        payload = NotificationPayload(title="Standup", body="Soon", event_id="evt-9")

        message = build_push_message("tok", payload)

        assert message["token"] == "tok"
        assert message["notification"] == {"title": "Standup", "body": "Soon"}
        assert message["data"] == {
            "eventId": "evt-9",
            "type": "event_reminder",
            "click_action": "FLUTTER_NOTIFICATION_CLICK",
        }
        assert message["android"]["priority"] == "high"
        assert message["android"]["notification"]["channel_id"] == "event_reminders"
        aps = message["apns"]["payload"]["aps"]
        assert aps == {"sound": "default", "badge": 1, "content-available": 1}

    def test_missing_event_id_becomes_empty_string(self):
        message = build_push_message("tok", NotificationPayload(title="t", body="b"))

        assert message["data"]["eventId"] == ""

    def test_options_override_defaults(self):
        options = PushMessageOptions(notification_type="digest", android_channel_id="digests")

        message = build_push_message("tok", NotificationPayload(), options)

        assert message["data"]["type"] == "digest"
        assert message["android"]["notification"]["channel_id"] == "digests"


class TestPushSender:
    async def test_sends_with_token(self, store, transport, push):
        notification_id = store.add_notification()
        recipient = Recipient(id="user-1", push_token="tok-1")

        result = await push.send(store.snapshot(notification_id), recipient)

        assert result.channel == NotificationChannel.PUSH
        assert result.message_id == "projects/test/messages/1"
        assert transport.sent[0]["token"] == "tok-1"
        assert store.in_app_messages == []

    async def test_no_token_falls_back_without_calling_transport(self, store, transport, push):
        notification_id = store.add_notification()

        result = await push.send(store.snapshot(notification_id), Recipient(id="user-1"))

        assert result.channel == NotificationChannel.IN_APP
        assert result.fallback_reason == "no_token"
        assert transport.sent == []
        assert len(store.in_app_messages) == 1

    @pytest.mark.parametrize(
        "code", [PushErrorCode.TOKEN_NOT_REGISTERED, PushErrorCode.INVALID_TOKEN],
    )
    async def test_token_error_clears_token_and_falls_back(self, store, transport, push, code):
        store.add_user("user-1", push_token="stale")
        transport.error = PushTransportError(code, "Requested entity was not found.", status_code=404)
        notification_id = store.add_notification()

        result = await push.send(store.snapshot(notification_id), store.users["user-1"])

        assert result.channel == NotificationChannel.IN_APP
        assert result.fallback_reason == "invalid_token"
        assert store.users["user-1"].push_token is None
        assert len(store.in_app_messages) == 1

    async def test_clear_token_failure_still_falls_back(self, store, transport, push):
        store.add_user("user-1", push_token="stale")
        store.fail_operations.add("clear_push_token")
        transport.error = PushTransportError(PushErrorCode.TOKEN_NOT_REGISTERED, "gone")
        notification_id = store.add_notification()

        result = await push.send(store.snapshot(notification_id), store.users["user-1"])

        assert result.channel == NotificationChannel.IN_APP
        assert store.users["user-1"].push_token == "stale"
        assert len(store.in_app_messages) == 1

    async def test_other_transport_error_raises(self, store, transport, push):
        transport.error = PushTransportError(PushErrorCode.UNAVAILABLE, "503 from FCM", status_code=503)
        notification_id = store.add_notification()

        with pytest.raises(ChannelDeliveryError) as exc_info:
            await push.send(store.snapshot(notification_id), Recipient(id="user-1", push_token="tok"))

        assert exc_info.value.code == "unavailable"
        assert str(exc_info.value) == "503 from FCM"
        assert store.in_app_messages == []


class TestEmailSender:
    async def test_queues_pending_request(self, store):
        sender = EmailSender(store, template_id="reminder_v2")
        notification_id = store.add_notification(channel="email")
        recipient = Recipient(id="user-1", email="ada@example.com")

        result = await sender.send(store.snapshot(notification_id), recipient)

        assert result.channel == NotificationChannel.EMAIL
        request = store.email_requests[0]
        assert request.to == "ada@example.com"
        assert request.subject == "Standup"
        assert request.body == "Starts in 10 minutes"
        assert request.event_id == "evt-1"
        assert request.template_id == "reminder_v2"
        assert request.status == EmailRequestStatus.PENDING

    async def test_missing_email_raises(self, store):
        sender = EmailSender(store)
        notification_id = store.add_notification(channel="email")

        with pytest.raises(ChannelDeliveryError) as exc_info:
            await sender.send(store.snapshot(notification_id), Recipient(id="user-1"))

        assert exc_info.value.code == "missing-email"
        assert store.email_requests == []


class TestInAppSender:
    async def test_creates_unread_entry(self, store, in_app):
        notification_id = store.add_notification(channel="in_app")

        result = await in_app.send(store.snapshot(notification_id), Recipient(id="user-1"))

        assert result.channel == NotificationChannel.IN_APP
        message = store.in_app_messages[0]
        assert message.user_id == "user-1"
        assert message.title == "Standup"
        assert message.type == "event_reminder"
        assert message.read is False


class TestParseChannel:
    @pytest.mark.parametrize("value", ["push", "email", "in_app"])
    def test_known_channels(self, value):
        assert parse_channel(value) == NotificationChannel(value)

    def test_unknown_channel(self):
        with pytest.raises(UnsupportedChannelError, match="Unsupported channel: sms"):
            parse_channel("sms")
