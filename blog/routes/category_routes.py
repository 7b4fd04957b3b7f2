from flask import Blueprint, jsonify

from blog.schemas.post_schema import CategorySchema
from blog.services.category_service import list_categories

category_bp = Blueprint("categories", __name__)

categories_schema = CategorySchema(many=True)


@category_bp.route("/categories", methods=["GET"])
def get_categories():
    return jsonify(categories_schema.dump(list_categories())), 200
