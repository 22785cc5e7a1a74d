from datetime import date, datetime, time, timezone
from typing import List, Optional
from pydantic import BaseModel, ValidationInfo, field_validator, model_validator

GRANULARITIES = ("daily", "weekly", "monthly")
PRICE_TYPES = ("actual", "average")


def _csv(value):
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class PriceTrendQuery(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    granularity: str = "daily"
    price_type: str = "actual"
    products: List[int] = []
    categories: List[str] = []
    suppliers: List[int] = []

    @staticmethod
    def from_args(args):
        """Map query-string arguments onto field names."""
        return {
            "start_date": args.get("startDate") or None,
            "end_date": args.get("endDate") or None,
            "granularity": args.get("granularity") or "daily",
            "price_type": args.get("priceType") or "actual",
            "products": _csv(args.get("products")),
            "categories": [c.lower() for c in _csv(args.get("categories"))],
            "suppliers": _csv(args.get("suppliers")),
        }

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _whole_days(cls, v, info: ValidationInfo):
        # a bare date covers that whole day
        if isinstance(v, str) and len(v) == 10:
            day = date.fromisoformat(v)
            return datetime.combine(day, time.max if info.field_name == "end_date" else time.min)
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, v):
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("granularity")
    @classmethod
    def _granularity(cls, v):
        if v not in GRANULARITIES:
            raise ValueError(f"granularity must be one of: {', '.join(GRANULARITIES)}")
        return v

    @field_validator("price_type")
    @classmethod
    def _price_type(cls, v):
        if v not in PRICE_TYPES:
            raise ValueError(f"priceType must be one of: {', '.join(PRICE_TYPES)}")
        return v

    @model_validator(mode="after")
    def _ordered_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    @property
    def date_range(self):
        """(start, end) when both bounds are given, else None."""
        if self.start_date and self.end_date:
            return self.start_date, self.end_date
        return None


class CompareQuery(BaseModel):
    by: str = "products"

    @field_validator("by")
    @classmethod
    def _by(cls, v):
        if v not in ("products", "categories"):
            raise ValueError("by must be products or categories")
        return v
