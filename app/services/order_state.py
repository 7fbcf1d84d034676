"""
Order State Machine for validating order status transitions.

    pending -> confirmed -> preparing -> ready -> delivered
        \\          \\            \\          \\
         `----------`------------`----------`--> cancelled

Staff (admin) move an order one step forward, or cancel it from any
non-terminal state. The owning client may only cancel while the order is
still pending. Nothing leaves `delivered` or `cancelled`.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Set

from app.exceptions import (
    AlreadyTerminal, InvalidStatus, InvalidTransition, TransitionForbidden
)
from app.models.order import Order, OrderStatus, StatusChange
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)


class OrderStateMachine:

    FORWARD: Dict[OrderStatus, OrderStatus] = {
        OrderStatus.PENDING: OrderStatus.CONFIRMED,
        OrderStatus.CONFIRMED: OrderStatus.PREPARING,
        OrderStatus.PREPARING: OrderStatus.READY,
        OrderStatus.READY: OrderStatus.DELIVERED,
    }

    TERMINAL: Set[OrderStatus] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

    # Labels a caller may request; `pending` is only ever the initial state
    TARGETS: Set[OrderStatus] = {
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    }

    @classmethod
    def parse_target(cls, label: str) -> OrderStatus:
        try:
            status = OrderStatus(label)
        except ValueError:
            raise InvalidStatus(label)
        if status not in cls.TARGETS:
            raise InvalidStatus(label)
        return status

    @classmethod
    def is_terminal(cls, status: OrderStatus) -> bool:
        return status in cls.TERMINAL

    @classmethod
    def next_states(cls, status: OrderStatus) -> Set[OrderStatus]:
        """States an admin may move to from `status`."""
        if cls.is_terminal(status):
            return set()
        return {cls.FORWARD[status], OrderStatus.CANCELLED}

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        return to_status in cls.next_states(from_status)

    @classmethod
    def authorize(cls, order: Order, target: OrderStatus, requester: CurrentUser):
        """
        Raise unless `requester` may move `order` to `target`.

        Raises:
            TransitionForbidden: requester is neither admin nor owner, or is
                the owner asking for anything but cancelling a pending order
            AlreadyTerminal: order is delivered or cancelled
            InvalidTransition: admin asked for a step outside the lifecycle
        """
        if not requester.is_admin and requester.id != order.clientId:
            raise TransitionForbidden(order.id, order.status.value, target.value)

        if cls.is_terminal(order.status):
            raise AlreadyTerminal(order.id, order.status.value)

        if not requester.is_admin:
            if target != OrderStatus.CANCELLED or order.status != OrderStatus.PENDING:
                raise TransitionForbidden(order.id, order.status.value, target.value)
            return

        if not cls.is_valid_transition(order.status, target):
            raise InvalidTransition(order.id, order.status.value, target.value)

    @classmethod
    def apply(cls, order: Order, target: OrderStatus, at: datetime, comment: Optional[str] = None) -> Order:
        """Return a copy of `order` moved to `target` with its history entry and dates."""
        entry = StatusChange(
            status=target,
            timestamp=at,
            comment=comment or f"Changement de statut: {order.status.value} -> {target.value}",
        )
        update = {
            "status": target,
            "history": [*order.history, entry],
        }
        if target == OrderStatus.CONFIRMED and order.confirmedAt is None:
            update["confirmedAt"] = at
        elif target == OrderStatus.DELIVERED and order.deliveredAt is None:
            update["deliveredAt"] = at

        logger.debug("Order %s: %s -> %s", order.id, order.status.value, target.value)
        return order.model_copy(update=update)
