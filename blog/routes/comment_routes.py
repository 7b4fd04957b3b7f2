from flask import Blueprint, jsonify, request

from blog.schemas.post_schema import CommentWithAuthorSchema
from blog.services.comment_service import submit_comment

comment_bp = Blueprint("comments", __name__)

comment_schema = CommentWithAuthorSchema()


@comment_bp.route("/posts/<int:post_id>/comments", methods=["POST"])
def create_comment(post_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    comment = submit_comment(
        post_id=post_id,
        name=data.get("name"),
        email=data.get("email"),
        content=data.get("content"),
    )
    return jsonify(comment_schema.dump(comment)), 201
