"""Order fulfilment state machine.

    pending -> accepted -> preparing -> out_for_delivery -> delivered

and any state before ``delivered`` may go to ``cancelled``.

``delivered`` and ``cancelled`` are terminal. Cancelling puts the
ordered quantities back on the shelf.
"""
import logging
from enum import Enum

from sqlalchemy import update

from bazaarbuddy.auth.permissions import role_has_scope
from bazaarbuddy.exceptions import Forbidden, InvalidInput, InvalidTransition, NotFound
from bazaarbuddy.metrics import STATUS_TRANSITIONS
from bazaarbuddy.models import db, Order, OrderStatusLog, utcnow
from bazaarbuddy.services.stock import release_stock

log = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput("Invalid status") from None


TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def _required_scope(new: OrderStatus) -> str:
    return "cancel_order" if new is OrderStatus.CANCELLED else "advance_order"


def _authorize(user, order: Order, new: OrderStatus):
    if user.role == "vendor":
        owns = order.vendor_id == user.id
    elif user.role == "supplier":
        owns = order.supplier_id == user.id
    else:
        owns = user.role == "admin"
    if not owns or not role_has_scope(user.role, _required_scope(new)):
        raise Forbidden(f"Not allowed to set order status to {new.value}")


def restock(order: Order) -> int:
    """Return every line's quantity to its item; count of items restocked."""
    restocked = 0
    for line in order.lines:
        if release_stock(line.item_id, line.quantity):
            restocked += 1
        else:
            log.warning({"event": "restock_skipped", "order": order.order_number, "item_id": line.item_id})
    return restocked


def _claim_transition(order: Order, current: OrderStatus, new: OrderStatus):
    """Move the row from ``current`` to ``new`` only if nobody else has moved it."""
    result = db.session.execute(
        update(Order)
        .where(Order.id == order.id, Order.status == current.value)
        .values(status=new.value, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    db.session.expire(order, ["status", "updated_at"])
    if result.rowcount == 0:
        raise InvalidTransition(order.status, new.value)


def update_status(user, order_id, new_status) -> Order:
    """Move an order to ``new_status``. Does NOT commit.

    The status is switched with a conditional UPDATE before any stock is
    released, so of two requests racing from the same status only one
    gets to restock; the other sees InvalidTransition.
    """
    new = OrderStatus.parse(new_status)
    order = db.session.get(Order, order_id)
    if not order:
        raise NotFound("Order not found")
    current = OrderStatus.parse(order.status)
    _authorize(user, order, new)

    if not can_transition(current, new):
        raise InvalidTransition(current.value, new.value)
    _claim_transition(order, current, new)

    if new is OrderStatus.CANCELLED:
        restock(order)
    db.session.add(OrderStatusLog(order_id=order.id, status=new.value, updated_by=user.id))

    STATUS_TRANSITIONS.labels(new.value).inc()
    log.info({
        "event": "order_status_changed",
        "order_number": order.order_number,
        "from": current.value,
        "to": new.value,
        "by": user.id,
    })
    return order
