"""Sample content and the ``flask init-db`` / ``flask seed`` commands."""
import logging

import click
from flask.cli import with_appcontext

from blog.db import db
from blog.repositories import category_repository, user_repository
from blog.services import category_service, post_service
from blog.services.slug import generate_slug

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {
        "name": "Alice Carter",
        "email": "alice@example.com",
        "bio": "Writes about frontend tooling and the odd side project.",
    },
    {
        "name": "Brian Kim",
        "email": "brian@example.com",
        "bio": "Backend developer, occasional performance nerd.",
    },
]

SAMPLE_CATEGORIES = ["React", "Python", "Databases"]

SAMPLE_POSTS = [
    {
        "title": "Getting Started with React Hooks",
        "excerpt": "A gentle tour of useState and useEffect.",
        "content": (
            "Hooks let function components hold state and run side effects. "
            "This post walks through useState, useEffect and custom hooks."
        ),
        "categories": ["React"],
        "author": "alice@example.com",
    },
    {
        "title": "Designing Relational Schemas for Blogs",
        "excerpt": "Users, posts, comments and a join table for categories.",
        "content": (
            "A blog needs surprisingly few tables. We look at foreign keys, "
            "cascade rules and unique slugs for posts and categories."
        ),
        "categories": ["Databases", "Python"],
        "author": "brian@example.com",
    },
    {
        "title": "Writing Flask Services That Stay Small",
        "excerpt": None,
        "content": (
            "Blueprints, an application factory and a thin service layer keep "
            "a Flask codebase easy to navigate as it grows."
        ),
        "categories": ["Python"],
        "author": "brian@example.com",
    },
]


def seed_sample_data():
    users = {}
    for entry in SAMPLE_USERS:
        user = user_repository.get_by_email(entry["email"])
        if not user:
            user = user_repository.create_user(**entry)
        users[entry["email"]] = user

    categories = {}
    for name in SAMPLE_CATEGORIES:
        slug = generate_slug(name)
        category = category_repository.get_by_slug(slug)
        if not category:
            category = category_service.create_category(name, slug)
        categories[name] = category
    db.session.commit()

    posts = []
    for entry in SAMPLE_POSTS:
        slug = generate_slug(entry["title"])
        existing = post_service.get_post_by_slug(slug)
        if existing:
            posts.append(existing)
            continue

        post = post_service.create_post({
            "title": entry["title"],
            "slug": slug,
            "excerpt": entry["excerpt"],
            "content": entry["content"],
            "author_id": users[entry["author"]].id,
            "category_ids": [categories[name].id for name in entry["categories"]],
        })
        posts.append(post_service.get_post_by_id(post.id))

    logger.info(
        "Seeded %d users, %d categories, %d posts",
        len(users), len(categories), len(posts),
    )
    return {
        "users": list(users.values()),
        "categories": list(categories.values()),
        "posts": posts,
    }


@click.command("init-db")
@with_appcontext
def init_db_command():
    db.create_all()
    click.echo("Initialized the database.")


@click.command("seed")
@with_appcontext
def seed_command():
    result = seed_sample_data()
    click.echo(
        f"Seeded {len(result['users'])} users, "
        f"{len(result['categories'])} categories, "
        f"{len(result['posts'])} posts."
    )


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)
