"""Channel senders (push, email, in-app) and the dispatcher that selects them."""

from .base import ChannelSender, DeliveryResult
from .dispatcher import ChannelDispatcher, parse_channel
from .email import EmailSender
from .in_app import InAppSender
from .push import PushMessageOptions, PushSender, build_push_message

__all__ = [
    "ChannelDispatcher",
    "ChannelSender",
    "DeliveryResult",
    "EmailSender",
    "InAppSender",
    "PushMessageOptions",
    "PushSender",
    "build_push_message",
    "parse_channel",
]
