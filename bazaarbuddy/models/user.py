# --- models/user.py ---
from bazaarbuddy.models import db, BIGINT, utcnow

ROLES = ("vendor", "supplier", "admin")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    role = db.Column(db.String(20), nullable=False)               # vendor, supplier, admin
    business_name = db.Column(db.String(150), nullable=True)
    business_type = db.Column(db.String(50), nullable=True)
    status = db.Column(db.String(20), default="active")            # active, pending, declined
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"

    def display_name(self):
        return self.business_name or self.name

    def to_public_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "businessName": self.business_name,
            "businessType": self.business_type,
        }
