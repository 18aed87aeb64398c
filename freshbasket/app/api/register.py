from flask import Flask

from freshbasket.modules.catalog.routes import bp as catalog_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(catalog_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "Fresh Basket API",
            "version": "0.1.0",
            "endpoints": {
                "catalog": ["/products", "/products/<id>", "/categories"],
            },
        }, 200
