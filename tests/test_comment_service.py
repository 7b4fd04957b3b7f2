import unittest


class TestCommentService(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        from blog import create_app
        from blog.config import TestConfig
        from blog.db import db

        cls.app = create_app(TestConfig)
        cls.db = db

    def setUp(self):
        from blog.models import Comment, User
        from blog.repositories import user_repository
        from blog.services import comment_service, post_service, user_service

        self.ctx = self.app.app_context()
        self.ctx.push()
        self.db.drop_all()
        self.db.create_all()

        self.Comment = Comment
        self.User = User
        self.comment_service = comment_service
        self.post_service = post_service
        self.user_service = user_service

        self.author = user_repository.create_user(name="Alice", email="alice@example.com")
        self.db.session.commit()
        self.post = post_service.create_post({
            "title": "Commentable post",
            "slug": "commentable-post",
            "content": "A post long enough to pass the content length rule easily.",
            "author_id": self.author.id,
        })

    def tearDown(self):
        self.db.session.remove()
        self.ctx.pop()

    def test_add_comment(self):
        comment = self.comment_service.add_comment(
            self.post.id, self.author.id, "Thanks for reading!"
        )
        self.assertIsNotNone(comment.id)
        self.assertEqual(comment.content, "Thanks for reading!")
        self.assertEqual(comment.post_id, self.post.id)

    def test_add_comment_rejects_short_content(self):
        from blog.errors import ValidationError

        with self.assertRaises(ValidationError):
            self.comment_service.add_comment(self.post.id, self.author.id, "too short")
        self.assertEqual(self.Comment.query.count(), 0)

    def test_comment_length_counts_every_character(self):
        from blog.errors import ValidationError

        for content in ("abcdefghi", " abc def ", "          "):
            with self.subTest(content=content):
                with self.assertRaises(ValidationError):
                    self.comment_service.add_comment(self.post.id, self.author.id, content)

        for content in ("abcdefghij", " abc def g", "abc def g "):
            with self.subTest(content=content):
                comment = self.comment_service.add_comment(
                    self.post.id, self.author.id, content
                )
                self.assertEqual(comment.content, content)

    def test_add_comment_to_missing_post(self):
        from blog.errors import NotFoundError

        with self.assertRaises(NotFoundError):
            self.comment_service.add_comment(999, self.author.id, "Long enough comment")

    def test_submit_comment_creates_user_once(self):
        first = self.comment_service.submit_comment(
            self.post.id, "Carol", "carol@example.com", "First comment from Carol"
        )
        self.assertEqual(self.User.query.count(), 2)
        self.assertEqual(self.Comment.query.count(), 1)

        second = self.comment_service.submit_comment(
            self.post.id, "Someone Else", "carol@example.com", "Second comment from Carol"
        )
        self.assertEqual(self.User.query.count(), 2)
        self.assertEqual(self.Comment.query.count(), 2)
        self.assertEqual(second.author_id, first.author_id)

        carol = self.User.query.filter_by(email="carol@example.com").one()
        self.assertEqual(carol.name, "Carol")

    def test_submit_comment_validates_before_writing(self):
        from blog.errors import NotFoundError, ValidationError

        with self.assertRaises(ValidationError):
            self.comment_service.submit_comment(
                self.post.id, "C", "carol@example.com", "Valid comment text"
            )
        with self.assertRaises(ValidationError):
            self.comment_service.submit_comment(
                self.post.id, "Carol", "not-an-email", "Valid comment text"
            )
        with self.assertRaises(NotFoundError):
            self.comment_service.submit_comment(
                999, "Carol", "carol@example.com", "Valid comment text"
            )

        self.assertEqual(self.User.query.count(), 1)
        self.assertEqual(self.Comment.query.count(), 0)

    def test_find_or_create_user_is_idempotent(self):
        user = self.user_service.find_or_create_user_by_email("dave@example.com", "Dave")
        again = self.user_service.find_or_create_user_by_email("dave@example.com", "David")

        self.assertEqual(user.id, again.id)
        self.assertEqual(again.name, "Dave")
        self.assertEqual(self.User.query.count(), 2)

    def test_delete_user_with_posts_is_rejected(self):
        from blog.errors import ConflictError

        with self.assertRaises(ConflictError):
            self.user_service.delete_user(self.author.id)
        self.assertIsNotNone(self.post_service.get_post_by_id(self.post.id))

    def test_delete_user_cascades_to_comments(self):
        comment = self.comment_service.submit_comment(
            self.post.id, "Erin", "erin@example.com", "Comment that will vanish"
        )

        self.assertTrue(self.user_service.delete_user(comment.author_id))

        self.assertEqual(self.Comment.query.count(), 0)
        self.assertEqual(self.post_service.get_post_by_id(self.post.id)["comments"], [])
        self.assertFalse(self.user_service.delete_user(999))


if __name__ == "__main__":
    unittest.main()
