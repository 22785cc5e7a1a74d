"""Price trend aggregation over historical orders.

Observations are (order, line) pairs whose line points at one of the
candidate items. They are bucketed by day, week (starting Sunday) or
month and grouped per (bucket, product).
"""
import logging
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List

from bazaarbuddy.models import db, User, Item, Order, OrderLine
from bazaarbuddy.schemas.analytics import PriceTrendQuery
from bazaarbuddy.telemetry import tracer

log = logging.getLogger(__name__)


def bucket_date(day: date, granularity: str) -> str:
    if granularity == "weekly":
        # Python weeks start on Monday (weekday() == 0); ours start on Sunday
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return start.isoformat()
    if granularity == "monthly":
        return f"{day.year:04d}-{day.month:02d}-01"
    return day.isoformat()


def candidate_items(query: PriceTrendQuery) -> List[Item]:
    items = Item.query
    if query.products:
        items = items.filter(Item.id.in_(query.products))
    if query.categories:
        items = items.filter(Item.category.in_(query.categories))
    if query.suppliers:
        items = items.filter(Item.supplier_id.in_(query.suppliers))
    if query.date_range:
        start, end = query.date_range
        items = items.filter(Item.created_at >= start, Item.created_at <= end)
    return items.all()


def _observations(items: Dict[int, Item], query: PriceTrendQuery):
    rows = (
        db.session.query(Order.created_at, OrderLine)
        .join(OrderLine, OrderLine.order_id == Order.id)
        .filter(OrderLine.item_id.in_(list(items)))
    )
    if query.date_range:
        start, end = query.date_range
        rows = rows.filter(Order.created_at >= start, Order.created_at <= end)
    rows = rows.order_by(Order.created_at.asc(), Order.id.asc(), OrderLine.position.asc())
    for created_at, line in rows:
        yield created_at, line, items[line.item_id]


def _supplier_names(supplier_ids) -> Dict[int, str]:
    if not supplier_ids:
        return {}
    users = User.query.filter(User.id.in_(list(supplier_ids))).all()
    return {u.id: u.display_name() for u in users}


def compute_price_trends(query: PriceTrendQuery) -> List[dict]:
    """Time-bucketed price points for the items matching ``query``.

    An empty candidate item set is not an error; it yields no points.
    """
    with tracer.start_as_current_span("analytics.price_trends") as span:
        items = {item.id: item for item in candidate_items(query)}
        span.set_attribute("analytics.candidate_items", len(items))
        if not items:
            return []

        suppliers = _supplier_names({item.supplier_id for item in items.values()})
        groups: "OrderedDict[tuple, dict]" = OrderedDict()
        for created_at, line, item in _observations(items, query):
            bucket = bucket_date(created_at.date(), query.granularity)
            key = (bucket, item.id)
            group = groups.get(key)
            if group is None:
                group = groups[key] = {
                    "date": bucket,
                    "productId": item.id,
                    "productName": item.name,
                    "category": item.category,
                    "supplierId": item.supplier_id,
                    "supplierName": suppliers.get(item.supplier_id, "Supplier"),
                    "prices": [],
                    "volume": 0,
                }
            group["prices"].append(Decimal(line.price))
            group["volume"] += line.quantity

        points = []
        for group in groups.values():
            prices = group.pop("prices")
            avg = sum(prices, Decimal("0")) / len(prices)
            group.update(
                price=avg,
                avgPrice=avg,
                minPrice=min(prices),
                maxPrice=max(prices),
            )
            points.append(group)

        # stable: points of the same bucket keep first-observed order
        points.sort(key=lambda p: p["date"])
        span.set_attribute("analytics.points", len(points))
        log.debug({"event": "price_trends", "items": len(items), "points": len(points)})
        return points


def list_products() -> List[dict]:
    return [
        {"id": item.id, "name": item.name, "category": item.category, "supplierId": item.supplier_id}
        for item in Item.query.order_by(Item.name.asc()).all()
    ]


def list_categories() -> List[str]:
    rows = db.session.query(Item.category).distinct().order_by(Item.category.asc()).all()
    return [category for (category,) in rows if category]


def list_suppliers() -> List[dict]:
    return [u.to_public_dict() for u in User.query.filter_by(role="supplier").order_by(User.name.asc())]
