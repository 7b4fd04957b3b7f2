import unittest
from datetime import datetime
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


class TestPostService(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        from blog import create_app
        from blog.config import TestConfig
        from blog.db import db

        cls.app = create_app(TestConfig)
        cls.db = db

    def setUp(self):
        from blog.models import Category, Comment, PostCategory, User
        from blog.repositories import user_repository
        from blog.services import category_service, comment_service, post_service

        self.ctx = self.app.app_context()
        self.ctx.push()
        self.db.drop_all()
        self.db.create_all()

        self.Category = Category
        self.Comment = Comment
        self.PostCategory = PostCategory
        self.User = User
        self.post_service = post_service
        self.comment_service = comment_service

        self.author = user_repository.create_user(name="Alice", email="alice@example.com")
        self.reader = user_repository.create_user(name="Bob", email="bob@example.com")
        self.db.session.commit()

        self.react = category_service.create_category("React")
        self.python = category_service.create_category("Python")

    def tearDown(self):
        self.db.session.remove()
        self.ctx.pop()

    def _data(self, **overrides):
        data = {
            "title": "Hello World",
            "slug": "hello-world",
            "content": "x" * 50,
            "author_id": self.author.id,
        }
        data.update(overrides)
        return data

    def test_create_post_returns_persisted_post(self):
        post = self.post_service.create_post(self._data(excerpt="", cover_image=""))

        self.assertIsNotNone(post.id)
        self.assertIsNotNone(post.created_at)
        self.assertIsNotNone(post.updated_at)
        self.assertIsNotNone(post.published_at)
        self.assertIsNone(post.excerpt)
        self.assertIsNone(post.cover_image)

    def test_create_post_as_draft(self):
        post = self.post_service.create_post(self._data(published_at=None))
        self.assertIsNone(post.published_at)

    def test_content_length_boundary(self):
        from blog.errors import ValidationError

        with self.assertRaises(ValidationError) as ctx:
            self.post_service.create_post(self._data(content="x" * 49))
        self.assertEqual(ctx.exception.field, "content")

        post = self.post_service.create_post(self._data(content="x" * 50))
        self.assertIsNotNone(post.id)

    def test_create_rejects_invalid_fields(self):
        from blog.errors import ValidationError

        invalid = [
            {"title": "Hey"},
            {"slug": "ab"},
            {"slug": "Hello-World"},
            {"slug": "hello_world"},
            {"cover_image": "not a url"},
            {"published_at": "yesterday"},
        ]
        for override in invalid:
            with self.subTest(override=override):
                with self.assertRaises(ValidationError):
                    self.post_service.create_post(self._data(**override))

        with self.assertRaises(ValidationError):
            self.post_service.create_post({"title": "Hello World"})

    def test_title_length_counts_every_character(self):
        from blog.errors import ValidationError

        for index, title in enumerate(("Hey!", " Hey", "     ")):
            with self.subTest(title=title):
                with self.assertRaises(ValidationError):
                    self.post_service.create_post(self._data(title=title, slug=f"short-{index}"))

        for index, title in enumerate(("Hello", "  Hey  ", " Hey ")):
            with self.subTest(title=title):
                post = self.post_service.create_post(self._data(title=title, slug=f"ok-{index}"))
                self.assertEqual(post.title, title)

    def test_storage_failure_is_logged(self):
        from blog.errors import StorageError

        failure = OperationalError("SELECT 1", {}, Exception("database is down"))
        with patch("blog.repositories.post_repository.get_rows", side_effect=failure):
            with self.assertLogs("blog.db", level="ERROR") as logs:
                with self.assertRaises(StorageError):
                    self.post_service.get_post_by_slug("hello-world")

        self.assertIn("database is down", logs.output[0])

    def test_create_rejects_unknown_author_and_category(self):
        from blog.errors import NotFoundError

        with self.assertRaises(NotFoundError):
            self.post_service.create_post(self._data(author_id=999))
        with self.assertRaises(NotFoundError):
            self.post_service.create_post(self._data(category_ids=[999]))

    def test_duplicate_slug_conflicts_and_keeps_first(self):
        from blog.errors import ConflictError

        first = self.post_service.create_post(self._data())
        with self.assertRaises(ConflictError):
            self.post_service.create_post(self._data(title="Another title"))

        stored = self.post_service.get_post_by_slug("hello-world")
        self.assertEqual(stored["id"], first.id)
        self.assertEqual(stored["title"], "Hello World")

    def test_get_by_slug_and_id(self):
        post = self.post_service.create_post(self._data(category_ids=[self.react.id]))

        by_slug = self.post_service.get_post_by_slug(post.slug)
        self.assertEqual(by_slug["id"], post.id)
        self.assertEqual(by_slug["author"]["name"], "Alice")
        self.assertEqual(by_slug["post_categories"][0]["category"]["name"], "React")

        self.assertEqual(self.post_service.get_post_by_id(post.id)["slug"], "hello-world")
        self.assertIsNone(self.post_service.get_post_by_id(999))
        self.assertIsNone(self.post_service.get_post_by_slug("HELLO-WORLD"))
        self.assertIsNone(self.post_service.get_post_by_slug("missing"))

    def test_list_posts_newest_first_with_empty_relations(self):
        self.post_service.create_post(self._data(
            slug="older", published_at=datetime(2024, 1, 1),
        ))
        self.post_service.create_post(self._data(
            slug="newer", published_at=datetime(2024, 6, 1),
        ))

        posts = self.post_service.list_posts()

        self.assertEqual([post["slug"] for post in posts], ["newer", "older"])
        for post in posts:
            self.assertEqual(post["comments"], [])
            self.assertEqual(post["post_categories"], [])

    def test_list_posts_empty(self):
        self.assertEqual(self.post_service.list_posts(), [])

    def test_list_posts_hydrates_comments_with_authors(self):
        post = self.post_service.create_post(self._data())
        self.comment_service.add_comment(post.id, self.reader.id, "Great article, thanks!")

        posts = self.post_service.list_posts()
        self.assertEqual(len(posts[0]["comments"]), 1)
        self.assertEqual(posts[0]["comments"][0]["author"]["email"], "bob@example.com")

    def test_update_post_partial_and_bumps_updated_at(self):
        post = self.post_service.create_post(self._data())
        previous = post.updated_at

        updated = self.post_service.update_post(post.id, {"title": "Hello Again"})

        self.assertEqual(updated.title, "Hello Again")
        self.assertEqual(updated.slug, "hello-world")
        self.assertGreater(updated.updated_at, previous)

        bumped = updated.updated_at
        again = self.post_service.update_post(post.id, {})
        self.assertGreater(again.updated_at, bumped)

    def test_update_post_revalidates_and_checks_slug(self):
        from blog.errors import ConflictError, ValidationError

        post = self.post_service.create_post(self._data())
        self.post_service.create_post(self._data(slug="taken-slug"))

        with self.assertRaises(ValidationError):
            self.post_service.update_post(post.id, {"content": "too short"})
        with self.assertRaises(ConflictError):
            self.post_service.update_post(post.id, {"slug": "taken-slug"})

        same = self.post_service.update_post(post.id, {"slug": "hello-world"})
        self.assertEqual(same.slug, "hello-world")

    def test_update_missing_post_returns_none(self):
        self.assertIsNone(self.post_service.update_post(999, {"title": "Hello Again"}))

    def test_update_replaces_categories(self):
        post = self.post_service.create_post(self._data(category_ids=[self.react.id]))

        self.post_service.update_post(post.id, {"category_ids": [self.python.id, self.react.id]})
        hydrated = self.post_service.get_post_by_id(post.id)
        names = sorted(link["category"]["name"] for link in hydrated["post_categories"])
        self.assertEqual(names, ["Python", "React"])

        self.post_service.update_post(post.id, {"category_ids": []})
        self.assertEqual(self.post_service.get_post_by_id(post.id)["post_categories"], [])

    def test_delete_post_cascades_to_comments_and_links(self):
        post = self.post_service.create_post(
            self._data(category_ids=[self.react.id, self.python.id])
        )
        for i in range(3):
            self.comment_service.add_comment(post.id, self.reader.id, f"Comment number {i}")

        self.assertEqual(self.Comment.query.count(), 3)
        self.assertEqual(self.PostCategory.query.count(), 2)

        self.assertTrue(self.post_service.delete_post(post.id))

        self.assertEqual(self.Comment.query.count(), 0)
        self.assertEqual(self.PostCategory.query.count(), 0)
        self.assertEqual(self.Category.query.count(), 2)
        self.assertEqual(self.User.query.count(), 2)
        self.assertIsNone(self.post_service.get_post_by_id(post.id))

        self.assertFalse(self.post_service.delete_post(post.id))

    def test_storage_failure_surfaces_as_storage_error(self):
        from blog.errors import StorageError

        failure = OperationalError("SELECT 1", {}, Exception("database is down"))
        with patch("blog.repositories.post_repository.get_rows", side_effect=failure):
            with self.assertRaises(StorageError) as ctx:
                self.post_service.list_posts()

        self.assertIs(ctx.exception.__cause__, failure)


if __name__ == "__main__":
    unittest.main()
