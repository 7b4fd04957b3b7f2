from flask import Flask, jsonify
from marshmallow import ValidationError as SchemaValidationError

from blog.config import Config
from blog.db import db
from blog.errors import BlogError, ValidationError
from blog.extensions.extensions import ma
from blog.logging_config import configure_logging


def _register_error_handlers(app):
    @app.errorhandler(BlogError)
    def handle_blog_error(error):
        body = {"error": error.message}
        if isinstance(error, ValidationError) and error.field:
            body["field"] = error.field
        return jsonify(body), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        return jsonify({"error": "Invalid request body", "fields": error.messages}), 400


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    ma.init_app(app)

    from blog import models  # noqa: F401
    from blog.routes.admin_routes import admin_bp
    from blog.routes.category_routes import category_bp
    from blog.routes.comment_routes import comment_bp
    from blog.routes.post_routes import post_bp
    from blog.seed import register_commands

    app.register_blueprint(post_bp, url_prefix="/api")
    app.register_blueprint(comment_bp, url_prefix="/api")
    app.register_blueprint(category_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    _register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app
