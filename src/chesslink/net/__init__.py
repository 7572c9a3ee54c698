"""Network boundary: REST calls, pub/sub transport, broker topics."""

from chesslink.net.api import QUEUED_MATCH_ID, ApiReply, IMatchApi, QtMatchApi, parse_reply
from chesslink.net.topics import EventKind, event_topic
from chesslink.net.transport import (
    ISubscription,
    ITransport,
    MemoryTransport,
    SubscriptionSet,
)

__all__ = [
    "QUEUED_MATCH_ID",
    "ApiReply",
    "EventKind",
    "IMatchApi",
    "ISubscription",
    "ITransport",
    "MemoryTransport",
    "QtMatchApi",
    "SubscriptionSet",
    "event_topic",
    "parse_reply",
]
