"""Atomic stock movements on items.

Stock is only ever changed with a single conditional UPDATE per item so
two orders racing for the same item cannot both take the last units.
Status is rewritten from the new stock in the same transaction.
"""
import logging

from sqlalchemy import case, select, update

from bazaarbuddy.models import db, Item, utcnow
from bazaarbuddy.models.item import IN_STOCK, OUT_OF_STOCK

log = logging.getLogger(__name__)

_STATUS_FROM_STOCK = case((Item.stock > 0, IN_STOCK), else_=OUT_OF_STOCK)


def _execute(stmt):
    return db.session.execute(stmt.execution_options(synchronize_session=False))


def _after_write(item_id):
    _execute(update(Item).where(Item.id == item_id).values(status=_STATUS_FROM_STOCK))
    cached = db.session.identity_map.get(db.session.identity_key(Item, item_id))
    if cached is not None:
        db.session.expire(cached, ["stock", "status", "updated_at"])


def current_stock(item_id):
    return db.session.execute(select(Item.stock).where(Item.id == item_id)).scalar()


def reserve_stock(item_id, quantity) -> bool:
    """Take ``quantity`` units if that many are still available.

    Returns False, without touching the row, when the item has fewer
    units left. Does NOT commit; caller is responsible for commit/rollback.
    """
    result = _execute(
        update(Item)
        .where(Item.id == item_id, Item.stock >= quantity)
        .values(stock=Item.stock - quantity, updated_at=utcnow())
    )
    if result.rowcount == 0:
        return False
    _after_write(item_id)
    return True


def release_stock(item_id, quantity) -> bool:
    """Give ``quantity`` units back to an item; False if it no longer exists."""
    result = _execute(
        update(Item)
        .where(Item.id == item_id)
        .values(stock=Item.stock + quantity, updated_at=utcnow())
    )
    if result.rowcount == 0:
        return False
    _after_write(item_id)
    return True


def repair_item_statuses() -> int:
    result = _execute(
        update(Item)
        .where(Item.status != _STATUS_FROM_STOCK)
        .values(status=_STATUS_FROM_STOCK)
    )
    db.session.commit()
    log.info({"event": "item_status_repaired", "rows": result.rowcount})
    return result.rowcount
