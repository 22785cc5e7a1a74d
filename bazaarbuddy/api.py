from bazaarbuddy.routes import orders_bp, items_bp, analytics_bp


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(items_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(analytics_bp)
