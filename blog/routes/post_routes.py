from flask import Blueprint, current_app, jsonify, request

from blog.schemas.post_schema import PostWithRelationsSchema
from blog.services import post_service
from blog.services.reading_time import calculate_reading_time
from blog.services.search_service import related_posts, search_posts
from blog.services.slug import generate_slug

post_bp = Blueprint("posts", __name__)

posts_schema = PostWithRelationsSchema(many=True)
post_schema = PostWithRelationsSchema()


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    posts = post_service.list_posts()

    query = request.args.get("q")
    if query is not None:
        posts = search_posts(posts, query)

    return jsonify(posts_schema.dump(posts)), 200


@post_bp.route("/posts/<int:post_id>", methods=["GET"])
def get_post(post_id):
    post = post_service.get_post_by_id(post_id)
    if not post:
        return jsonify({"error": "Post not found"}), 404
    return jsonify(post_schema.dump(post)), 200


@post_bp.route("/posts/slug/<slug>", methods=["GET"])
def get_post_by_slug(slug):
    post = post_service.get_post_by_slug(slug)
    if not post:
        return jsonify({"error": "Post not found"}), 404

    payload = post_schema.dump(post)
    payload["readingTime"] = calculate_reading_time(post["content"])
    return jsonify(payload), 200


@post_bp.route("/posts/slug/<slug>/related", methods=["GET"])
def get_related_posts(slug):
    default_limit = current_app.config.get("RELATED_POSTS_LIMIT", 3)
    limit = request.args.get("limit", default=default_limit, type=int)

    post = post_service.get_post_by_slug(slug)
    if not post:
        return jsonify({"error": "Post not found"}), 404

    related = related_posts(post, post_service.list_posts(), limit)
    return jsonify(posts_schema.dump(related)), 200


@post_bp.route("/slug", methods=["GET"])
def suggest_slug():
    title = request.args.get("title", default="")
    return jsonify({"slug": generate_slug(title)}), 200
