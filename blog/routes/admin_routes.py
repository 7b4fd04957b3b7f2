from flask import Blueprint, jsonify, request

from blog.schemas.post_schema import PostInputSchema, PostSchema
from blog.services import post_service

admin_bp = Blueprint("admin", __name__)

post_input_schema = PostInputSchema()
post_schema = PostSchema()


def _read_post_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return post_input_schema.load(data)


@admin_bp.route("/posts", methods=["POST"])
def create_post():
    data = _read_post_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    post = post_service.create_post(data)
    return jsonify(post_schema.dump(post)), 201


@admin_bp.route("/posts/<int:post_id>", methods=["PUT", "PATCH"])
def update_post(post_id):
    data = _read_post_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    post = post_service.update_post(post_id, data)
    if not post:
        return jsonify({"error": "Post not found"}), 404
    return jsonify(post_schema.dump(post)), 200


@admin_bp.route("/posts/<int:post_id>", methods=["DELETE"])
def delete_post(post_id):
    if not post_service.delete_post(post_id):
        return jsonify({"error": "Post not found"}), 404
    return jsonify({"message": "Post deleted"}), 200
