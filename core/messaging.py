"""
Message delivery state for inbox ticks and the admin messaging console.

Delivery state is display-only and never authoritative; a message without
one is shown as delivered.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Final

from utils.formatting import clean_token


class DeliveryState(Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


DEFAULT_DELIVERY_STATE: Final[DeliveryState] = DeliveryState.DELIVERED

DELIVERY_LABELS: Final[dict[DeliveryState, str]] = {
    DeliveryState.SENT: "Sent",
    DeliveryState.DELIVERED: "Delivered",
    DeliveryState.READ: "Read",
}


def derive_delivery_state(message: object) -> DeliveryState:
    """Read `delivery_state` from a mapping or an object attribute."""
    if isinstance(message, Mapping):
        raw = message.get("delivery_state")
    else:
        raw = getattr(message, "delivery_state", None)
    if isinstance(raw, DeliveryState):
        return raw
    token = clean_token(raw)
    for state in DeliveryState:
        if state.value == token:
            return state
    return DEFAULT_DELIVERY_STATE


def format_delivery_state(state: object) -> str:
    if not isinstance(state, DeliveryState):
        state = derive_delivery_state({"delivery_state": state})
    return DELIVERY_LABELS[state]


def count_delivery_states(messages: Iterable[object]) -> dict[str, int]:
    counts = {state.value: 0 for state in DeliveryState}
    for message in messages:
        counts[derive_delivery_state(message).value] += 1
    return counts
