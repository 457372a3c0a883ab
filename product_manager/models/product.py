import uuid
from datetime import datetime, timezone
from product_manager.extensions import db


def _new_id():
    return uuid.uuid4().hex


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    image = db.Column(db.String(1024))  # public URL at the image host
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    VALID_STATUSES = ("active", "inactive")

    @property
    def is_active(self):
        return self.status == "active"

    def to_dict(self):
        """JSON shape returned by the API."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "date": self.date,
            "image": self.image,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Product {self.id}: {self.title}>"


def _isoformat(value):
    return value.isoformat() if value else None
