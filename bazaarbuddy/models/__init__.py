from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Re-export common models for convenience
from .user import User  # noqa: E402,F401
from .item import Item  # noqa: E402,F401
from .order import Order, OrderLine, OrderStatusLog  # noqa: E402,F401
