from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey

from bazaarbuddy.models import db, BIGINT, utcnow


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_vendor_created", "vendor_id", "created_at"),
        db.Index("ix_orders_supplier_created", "supplier_id", "created_at"),
    )
    id = Column(BIGINT, primary_key=True)
    order_number = Column(String(40), unique=True, nullable=False)
    vendor_id = Column(BIGINT, ForeignKey("users.id"), nullable=False)
    supplier_id = Column(BIGINT, ForeignKey("users.id"), nullable=False)
    status = Column(String(30), nullable=False, default="pending")
    payment_method = Column(String(20), nullable=False, default="cash")
    delivery_address = Column(Text, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)  # fixed at creation
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    lines = db.relationship(
        "OrderLine",
        backref="order",
        cascade="all, delete-orphan",
        lazy=True,
        order_by="OrderLine.position",
    )
    history = db.relationship(
        "OrderStatusLog",
        backref="order",
        cascade="all, delete-orphan",
        lazy=True,
        order_by="OrderStatusLog.id",
    )

    def to_dict(self, with_history=True):
        data = {
            "id": self.id,
            "orderId": self.order_number,
            "vendorId": self.vendor_id,
            "supplierId": self.supplier_id,
            "items": [line.to_dict() for line in self.lines],
            "totalAmount": float(self.total_amount),
            "paymentMethod": self.payment_method,
            "deliveryAddress": self.delivery_address,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_history:
            data["history"] = [entry.to_dict() for entry in self.history]
        return data


class OrderLine(db.Model):
    __tablename__ = "order_line"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(BIGINT, db.ForeignKey("orders.id"), nullable=False, index=True)
    position = db.Column(Integer, nullable=False, default=0)
    # plain reference: lines outlive the item they were bought from
    item_id = db.Column(BIGINT, nullable=False, index=True)

    # snapshot taken when the order was placed
    name = db.Column(db.String(100), nullable=False)
    unit = db.Column(db.String(20))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    total = db.Column(db.Numeric(12, 2), nullable=False)

    def to_dict(self):
        return {
            "itemId": self.item_id,
            "name": self.name,
            "unit": self.unit,
            "price": float(self.price),
            "quantity": self.quantity,
            "total": float(self.total),
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("orders.id"), nullable=False)
    status = Column(String(30), nullable=False)
    updated_by = Column(BIGINT, nullable=False)
    timestamp = Column(DateTime, default=utcnow)

    def to_dict(self):
        return {
            "status": self.status,
            "updatedBy": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
