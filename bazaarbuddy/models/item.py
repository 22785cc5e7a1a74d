# --- models/item.py ---
from sqlalchemy.orm import validates

from bazaarbuddy.models import db, BIGINT, utcnow

CATEGORIES = ("vegetables", "fruits", "grains", "dairy", "meat", "spices", "beverages", "other")
UNITS = ("kg", "g", "l", "ml", "piece", "dozen", "pack")

IN_STOCK = "in_stock"
OUT_OF_STOCK = "out_of_stock"


def stock_status(stock):
    return IN_STOCK if stock and stock > 0 else OUT_OF_STOCK


class Item(db.Model):
    __tablename__ = "item"

    id = db.Column(BIGINT, primary_key=True)
    supplier_id = db.Column(BIGINT, db.ForeignKey("users.id"), nullable=False, index=True)

    # Core details
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(30), nullable=False, index=True)
    unit = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(255), nullable=True)

    # Pricing & inventory
    price = db.Column(db.Numeric(10, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=OUT_OF_STOCK)  # derived from stock

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    supplier = db.relationship("User", backref="items")

    @validates("stock")
    def _sync_status(self, key, value):
        if value is None or value < 0:
            raise ValueError("stock must be a non-negative integer")
        self.status = stock_status(value)
        return value

    def to_dict(self):
        return {
            "id": self.id,
            "supplierId": self.supplier_id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "price": float(self.price),
            "stock": self.stock,
            "status": self.status,
            "description": self.description,
            "image": self.image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
