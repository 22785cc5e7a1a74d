import logging
from typing import List

import pandas as pd
from werkzeug.utils import secure_filename

from bazaarbuddy.exceptions import Conflict, InvalidInput, NotFound
from bazaarbuddy.models import db, User, Item, OrderLine
from bazaarbuddy.schemas.item import AddItemRequest, UpdateItemRequest
from bazaarbuddy.utils.validation import parse_model

log = logging.getLogger(__name__)

BULK_COLUMNS = {"name", "category", "unit", "price", "stock"}


def create_item(supplier, data: AddItemRequest) -> Item:
    item = Item(
        supplier_id=supplier.id,
        name=data.name.strip(),
        category=data.category,
        unit=data.unit,
        price=data.price,
        stock=data.stock,
        description=data.description,
        image=data.image,
    )
    db.session.add(item)
    return item


def get_owned_item(supplier, item_id) -> Item:
    item = db.session.get(Item, item_id)
    if not item or item.supplier_id != supplier.id:
        raise NotFound("Item not found")
    return item


def update_item(supplier, item_id, data: UpdateItemRequest) -> Item:
    item = get_owned_item(supplier, item_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "category", "unit", "price", "stock"):
            continue
        # stock goes through the model validator, which resets status
        setattr(item, field, value)
    return item


def delete_item(supplier, item_id):
    item = get_owned_item(supplier, item_id)
    if OrderLine.query.filter_by(item_id=item.id).first():
        raise Conflict("Item is referenced by existing orders")
    db.session.delete(item)


def list_items(supplier) -> List[Item]:
    return Item.query.filter_by(supplier_id=supplier.id).order_by(Item.created_at.desc(), Item.id.desc()).all()


def list_supplier_catalog(supplier_id) -> List[Item]:
    supplier = User.query.filter_by(id=supplier_id, role="supplier").first()
    if not supplier:
        raise NotFound("Supplier not found")
    return (
        Item.query.filter(Item.supplier_id == supplier.id, Item.stock > 0)
        .order_by(Item.name.asc())
        .all()
    )


def list_suppliers() -> List[User]:
    return User.query.filter_by(role="supplier", status="active").order_by(User.name.asc()).all()


def read_item_rows(file) -> List[dict]:
    """Parse an uploaded CSV or Excel sheet into row dicts."""
    filename = secure_filename(file.filename or "")
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    try:
        if ext == "csv":
            df = pd.read_csv(file)
        elif ext in ("xls", "xlsx"):
            df = pd.read_excel(file)
        else:
            raise InvalidInput("Unsupported file type")
    except (ValueError, pd.errors.ParserError) as e:
        raise InvalidInput(f"File read error: {e}")
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = BULK_COLUMNS.difference(df.columns)
    if missing:
        raise InvalidInput(f"Missing columns: {', '.join(sorted(missing))}")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def bulk_create_items(supplier, rows: List[dict]) -> List[Item]:
    """Insert all rows or none: every row is validated before the first insert."""
    if not rows:
        raise InvalidInput("Items array is required")
    parsed = []
    for index, row in enumerate(rows, start=1):
        try:
            parsed.append(parse_model(AddItemRequest, row))
        except InvalidInput as e:
            label = row.get("name") if isinstance(row, dict) and row.get("name") else "Unnamed item"
            raise InvalidInput(f"Row {index} ({label}): {e.message}", details=e.details)
    created = [create_item(supplier, data) for data in parsed]
    log.info({"event": "items_bulk_created", "supplier_id": supplier.id, "count": len(created)})
    return created
