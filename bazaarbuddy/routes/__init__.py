from .orders import orders_bp
from .items import items_bp
from .analytics import analytics_bp


__all__ = [
    'orders_bp',
    'items_bp',
    'analytics_bp',
]
