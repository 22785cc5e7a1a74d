import logging
import time
import uuid
from decimal import Decimal
from typing import Dict, List

from bazaarbuddy.exceptions import InsufficientStock, InvalidInput, NotFound, Forbidden
from bazaarbuddy.metrics import ORDERS_PLACED, ORDER_VALUE, STOCK_REJECTIONS
from bazaarbuddy.models import db, User, Item, Order, OrderLine, OrderStatusLog
from bazaarbuddy.services.stock import reserve_stock, current_stock

log = logging.getLogger(__name__)

PAYMENT_METHODS = ("cash", "upi", "card", "credit")


def generate_order_number() -> str:
    """Readable, time-ordered order number with a random suffix against collisions."""
    return f"ORD{int(time.time() * 1000)}-{uuid.uuid4().hex[:6].upper()}"


def _requested_quantities(lines) -> Dict[int, int]:
    # repeated item ids are checked and reserved as one quantity
    requested: Dict[int, int] = {}
    for line in lines:
        requested[line.item_id] = requested.get(line.item_id, 0) + line.quantity
    return requested


def _check_stock(items: Dict[int, Item], requested: Dict[int, int]):
    for item_id, qty in requested.items():
        item = items[item_id]
        if item.stock < qty:
            STOCK_REJECTIONS.labels("validation").inc()
            raise InsufficientStock(item.name, item.stock, qty)


def place_order(vendor, supplier_id, lines: List, delivery_address: str, payment_method: str = "cash") -> Order:
    """Validate and stage a vendor order against one supplier's items.

    Everything is validated before the first write. Stock is then taken
    with one conditional decrement per distinct item, and the order, its
    lines and its first status entry are added to the session. Does NOT
    commit; the caller wraps this in ``transactional`` so a failed
    reservation rolls back every earlier one.
    """
    if not lines:
        raise InvalidInput("Supplier ID and items are required")
    for line in lines:
        if line.quantity <= 0:
            raise InvalidInput(f"Invalid quantity for item: {line.item_id}")
    address = (delivery_address or "").strip()
    if not address:
        raise InvalidInput("Delivery address is required")
    method = (payment_method or "cash").strip().lower()
    if method not in PAYMENT_METHODS:
        raise InvalidInput(f"paymentMethod must be one of: {', '.join(PAYMENT_METHODS)}")

    supplier = User.query.filter_by(id=supplier_id, role="supplier").first()
    if not supplier:
        raise NotFound("Supplier not found")

    requested = _requested_quantities(lines)
    items = {
        item.id: item
        for item in Item.query.filter(Item.id.in_(list(requested)), Item.supplier_id == supplier.id)
    }
    for item_id in requested:
        if item_id not in items:
            raise NotFound(f"Item not found or doesn't belong to supplier: {item_id}")
    _check_stock(items, requested)

    order = Order(
        order_number=generate_order_number(),
        vendor_id=vendor.id,
        supplier_id=supplier.id,
        payment_method=method,
        delivery_address=address,
        status="pending",
    )
    total_amount = Decimal("0")
    for position, line in enumerate(lines):
        item = items[line.item_id]
        price = Decimal(item.price)
        line_total = price * line.quantity
        total_amount += line_total
        order.lines.append(
            OrderLine(
                position=position,
                item_id=item.id,
                name=item.name,
                unit=item.unit,
                price=price,
                quantity=line.quantity,
                total=line_total,
            )
        )
    order.total_amount = total_amount

    for item_id, qty in requested.items():
        if not reserve_stock(item_id, qty):
            STOCK_REJECTIONS.labels("reservation").inc()
            log.warning({"event": "stock_reservation_failed", "item_id": item_id, "requested": qty})
            raise InsufficientStock(items[item_id].name, current_stock(item_id), qty)

    db.session.add(order)
    db.session.flush()
    db.session.add(OrderStatusLog(order_id=order.id, status="pending", updated_by=vendor.id))

    ORDERS_PLACED.inc()
    ORDER_VALUE.observe(float(total_amount))
    log.info({
        "event": "order_placed",
        "order_number": order.order_number,
        "vendor_id": vendor.id,
        "supplier_id": supplier.id,
        "lines": len(order.lines),
        "total_amount": str(total_amount),
    })
    return order


def list_orders(user) -> List[Order]:
    query = Order.query
    if user.role == "vendor":
        query = query.filter_by(vendor_id=user.id)
    elif user.role == "supplier":
        query = query.filter_by(supplier_id=user.id)
    elif user.role != "admin":
        return []
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def is_party(user, order: Order) -> bool:
    return user.role == "admin" or user.id in (order.vendor_id, order.supplier_id)


def get_order(user, order_id) -> Order:
    order = db.session.get(Order, order_id)
    if not order:
        raise NotFound("Order not found")
    if not is_party(user, order):
        raise Forbidden("Not allowed to view this order")
    return order
