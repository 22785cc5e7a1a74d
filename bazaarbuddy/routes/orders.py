from flask import Blueprint, current_app, request
from flask_limiter.util import get_remote_address

from bazaarbuddy.extensions import limiter
from bazaarbuddy.schemas.order import PlaceOrderRequest, UpdateStatusRequest
from bazaarbuddy.services import order_service
from bazaarbuddy.services.order_status import update_status
from bazaarbuddy.utils import auth_required, role_required, transactional, validate_schema, ok
from bazaarbuddy.version import API_PREFIX

orders_bp = Blueprint("orders", __name__, url_prefix=f"{API_PREFIX}/orders")


@orders_bp.route("", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@auth_required
@role_required("vendor:place_order")
@validate_schema(PlaceOrderRequest)
def place_order():
    """Place an order with one supplier.
    ---
    tags: [Orders]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [supplierId, items, deliveryAddress]
          properties:
            supplierId: {type: integer}
            items:
              type: array
              items:
                type: object
                properties:
                  itemId: {type: integer}
                  quantity: {type: integer, minimum: 1}
            deliveryAddress: {type: string}
            paymentMethod: {type: string, default: cash}
    responses:
      "200": {description: Order placed}
      "400": {description: Validation failed or insufficient stock}
      "404": {description: Supplier or item not found}
    """
    data = request.validated_data
    with transactional("Order placement failed"):
        order = order_service.place_order(
            request.user,
            data.supplier_id,
            data.items,
            data.delivery_address,
            data.payment_method,
        )
    return ok("Order placed successfully", order=order.to_dict())


@orders_bp.route("", methods=["GET"])
@auth_required
def list_orders():
    """Orders visible to the caller, newest first.
    ---
    tags: [Orders]
    responses:
      "200": {description: Orders for the caller's role}
    """
    orders = order_service.list_orders(request.user)
    return ok(
        orders=[order.to_dict(with_history=False) for order in orders],
        totalOrders=len(orders),
    )


@orders_bp.route("/<int:order_id>", methods=["GET"])
@auth_required
def get_order(order_id):
    order = order_service.get_order(request.user, order_id)
    return ok(order=order.to_dict())


@orders_bp.route("/<int:order_id>/status", methods=["PATCH"])
@auth_required
@validate_schema(UpdateStatusRequest)
def update_order_status(order_id):
    """Advance or cancel an order.
    ---
    tags: [Orders]
    parameters:
      - in: path
        name: order_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            status:
              type: string
              enum: [pending, accepted, preparing, out_for_delivery, delivered, cancelled]
    responses:
      "200": {description: Status updated}
      "400": {description: Unknown status}
      "403": {description: Caller may not make this change}
      "404": {description: Order not found}
      "409": {description: Transition not allowed from the current status}
    """
    new_status = request.validated_data.status
    with transactional("Failed to update order status"):
        order = update_status(request.user, order_id, new_status)
    return ok("Order status updated successfully", order=order.to_dict())
