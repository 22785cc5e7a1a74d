from flask import Blueprint, current_app, request
from flask_limiter.util import get_remote_address

from bazaarbuddy.extensions import limiter
from bazaarbuddy.schemas.analytics import PriceTrendQuery, CompareQuery
from bazaarbuddy.services import analytics
from bazaarbuddy.services.price_stats import (
    compare_prices,
    compute_statistics,
    generate_insights,
    generate_recommendations,
)
from bazaarbuddy.utils import auth_required, role_required, parse_model, jsonable, ok
from bazaarbuddy.version import API_PREFIX

analytics_bp = Blueprint("analytics", __name__, url_prefix=f"{API_PREFIX}/analytics")


@analytics_bp.before_request
@auth_required
@role_required(["vendor:view_analytics", "admin"])
def _enforce_analytics_role():
    """Ensure the requester is an authenticated vendor or admin."""
    return None


limiter.limit(
    lambda: current_app.config["ANALYTICS_LIMIT_PER_IP"],
    key_func=get_remote_address,
)(analytics_bp)


def _price_data():
    query = parse_model(PriceTrendQuery, PriceTrendQuery.from_args(request.args))
    return analytics.compute_price_trends(query)


@analytics_bp.route("/price-trends", methods=["GET"])
def price_trends():
    """Time-bucketed price points.
    ---
    tags: [Analytics]
    parameters:
      - {in: query, name: startDate, type: string, format: date}
      - {in: query, name: endDate, type: string, format: date}
      - {in: query, name: granularity, type: string, enum: [daily, weekly, monthly]}
      - {in: query, name: priceType, type: string, enum: [actual, average]}
      - {in: query, name: products, type: string, description: comma separated item ids}
      - {in: query, name: categories, type: string}
      - {in: query, name: suppliers, type: string, description: comma separated supplier ids}
    responses:
      "200": {description: Price points sorted by bucket date}
      "403": {description: Vendors and admins only}
    """
    return ok(priceData=jsonable(_price_data()))


@analytics_bp.route("/statistics", methods=["GET"])
def statistics():
    return ok(statistics=jsonable(compute_statistics(_price_data())))


@analytics_bp.route("/comparison", methods=["GET"])
def comparison():
    by = parse_model(CompareQuery, {"by": request.args.get("by") or "products"}).by
    return ok(by=by, comparison=jsonable(compare_prices(_price_data(), by)))


@analytics_bp.route("/insights", methods=["GET"])
def insights():
    data = _price_data()
    return ok(
        insights=jsonable(generate_insights(data)),
        recommendations=jsonable(generate_recommendations(data)),
    )


@analytics_bp.route("/summary", methods=["GET"])
def summary():
    data = _price_data()
    return ok(
        priceData=jsonable(data),
        statistics=jsonable(compute_statistics(data)),
        insights=jsonable(generate_insights(data)),
        recommendations=jsonable(generate_recommendations(data)),
    )


@analytics_bp.route("/products", methods=["GET"])
def products():
    return ok(products=analytics.list_products())


@analytics_bp.route("/categories", methods=["GET"])
def categories():
    return ok(categories=analytics.list_categories())


@analytics_bp.route("/suppliers", methods=["GET"])
def suppliers():
    return ok(suppliers=analytics.list_suppliers())
