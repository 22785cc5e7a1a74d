from flask import Blueprint, request

from bazaarbuddy.schemas.item import AddItemRequest, UpdateItemRequest, BulkItemsRequest
from bazaarbuddy.services import item_service
from bazaarbuddy.utils import auth_required, role_required, transactional, validate_schema, parse_model, ok
from bazaarbuddy.version import API_PREFIX

items_bp = Blueprint("items", __name__, url_prefix=API_PREFIX)


@items_bp.route("/items", methods=["POST"])
@auth_required
@role_required("supplier:manage_items")
@validate_schema(AddItemRequest)
def add_item():
    with transactional("Failed to add item"):
        item = item_service.create_item(request.user, request.validated_data)
    return ok("Item added", item=item.to_dict())


@items_bp.route("/items", methods=["GET"])
@auth_required
@role_required("supplier:manage_items")
def list_items():
    items = item_service.list_items(request.user)
    return ok(items=[item.to_dict() for item in items])


@items_bp.route("/items/<int:item_id>", methods=["PATCH"])
@auth_required
@role_required("supplier:manage_items")
@validate_schema(UpdateItemRequest)
def update_item(item_id):
    with transactional("Failed to update item"):
        item = item_service.update_item(request.user, item_id, request.validated_data)
    return ok("Item updated", item=item.to_dict())


@items_bp.route("/items/<int:item_id>", methods=["DELETE"])
@auth_required
@role_required("supplier:manage_items")
def delete_item(item_id):
    with transactional("Failed to delete item"):
        item_service.delete_item(request.user, item_id)
    return ok("Item deleted")


@items_bp.route("/items/bulk", methods=["POST"])
@auth_required
@role_required("supplier:manage_items")
def bulk_add_items():
    """Add many items from a JSON ``items`` array or an uploaded CSV/Excel file."""
    file = request.files.get("file")
    if file:
        rows = item_service.read_item_rows(file)
    else:
        rows = parse_model(BulkItemsRequest, request.get_json(silent=True)).items
    with transactional("Failed to bulk upload items"):
        created = item_service.bulk_create_items(request.user, rows)
    return ok(
        f"{len(created)} items uploaded",
        insertedCount=len(created),
        insertedIds=[item.id for item in created],
    )


@items_bp.route("/suppliers", methods=["GET"])
@auth_required
def list_suppliers():
    suppliers = item_service.list_suppliers()
    return ok(suppliers=[s.to_public_dict() for s in suppliers])


@items_bp.route("/suppliers/<int:supplier_id>/items", methods=["GET"])
@auth_required
def supplier_items(supplier_id):
    items = item_service.list_supplier_catalog(supplier_id)
    return ok(items=[item.to_dict() for item in items])
