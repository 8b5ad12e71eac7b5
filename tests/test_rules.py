import unittest
from types import SimpleNamespace

from twitterclone.app import rules
from twitterclone.app.common.auth import Identity
from twitterclone.app.common.errors import Forbidden, NotFound, ValidationFailed


class InMemoryStore:
    """Just enough of `Store` for the write rules."""

    def __init__(self):
        self.accounts = {}
        self.posts = {}  # post_id -> author_id
        self.follows = set()
        self.likes = set()
        self.replies = []
        self.notifications = []
        self.commits = 0

    def add_account(self, account_id, username):
        self.accounts[account_id] = SimpleNamespace(id=account_id, username=username, name=username.title())

    def find_account_by_id(self, account_id):
        return self.accounts.get(account_id)

    def follow_exists(self, follower_id, following_id):
        return (follower_id, following_id) in self.follows

    def like_exists(self, post_id, account_id):
        return (post_id, account_id) in self.likes

    def post_author(self, post_id):
        return self.posts.get(post_id)

    def add_follow(self, follower_id, following_id):
        self.follows.add((follower_id, following_id))

    def remove_follow(self, follower_id, following_id):
        existed = (follower_id, following_id) in self.follows
        self.follows.discard((follower_id, following_id))
        return existed

    def add_like(self, post_id, account_id):
        self.likes.add((post_id, account_id))

    def remove_like(self, post_id, account_id):
        self.likes.discard((post_id, account_id))

    def likers_of(self, post_id):
        return [self.accounts[a] for p, a in sorted(self.likes) if p == post_id]

    def add_reply(self, post_id, account_id, text):
        self.replies.append((post_id, account_id, text))

    def replies_of(self, post_id):
        return [r for r in self.replies if r[0] == post_id]

    def delete_post(self, post_id):
        self.posts.pop(post_id, None)

    def add_notification(self, recipient_id, actor_id, kind, message, post_id=None):
        self.notifications.append((recipient_id, actor_id, kind, post_id))

    def commit(self):
        self.commits += 1


class RulesTest(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryStore()
        self.store.add_account(1, "alice")
        self.store.add_account(2, "bob")
        self.store.posts[10] = 2
        self.alice = Identity(account_id=1, handle="alice")
        self.bob = Identity(account_id=2, handle="bob")

    def test_self_follow_rejected_before_any_write(self):
        with self.assertRaises(ValidationFailed):
            rules.follow(self.store, self.alice, 1)
        self.assertEqual(self.store.follows, set())
        self.assertEqual(self.store.commits, 0)

    def test_follow_then_duplicate(self):
        rules.follow(self.store, self.alice, 2)
        with self.assertRaises(ValidationFailed) as ctx:
            rules.follow(self.store, self.alice, 2)
        self.assertEqual(ctx.exception.code, "already_following")
        self.assertEqual(self.store.follows, {(1, 2)})
        self.assertEqual(self.store.notifications, [(2, 1, "follow", None)])

    def test_like_toggle_returns_to_start(self):
        first = rules.toggle_like(self.store, self.alice, 10)
        second = rules.toggle_like(self.store, self.alice, 10)
        self.assertTrue(first.liked)
        self.assertFalse(second.liked)
        self.assertEqual(self.store.likes, set())
        self.assertEqual(self.store.notifications, [(2, 1, "like", 10)])

    def test_reply_denied_without_follow(self):
        with self.assertRaises(Forbidden):
            rules.create_reply(self.store, self.alice, 10, "hi")
        self.assertEqual(self.store.replies, [])

        self.store.follows.add((1, 2))
        rules.create_reply(self.store, self.alice, 10, "hi")
        self.assertEqual(self.store.replies, [(10, 1, "hi")])
        self.assertEqual(self.store.notifications, [(2, 1, "reply", 10)])

    def test_delete_by_non_author_is_not_found(self):
        with self.assertRaises(NotFound):
            rules.delete_post(self.store, self.alice, 10)
        self.assertIn(10, self.store.posts)

        rules.delete_post(self.store, self.bob, 10)
        self.assertNotIn(10, self.store.posts)

    def test_visibility_reads(self):
        with self.assertRaises(NotFound):
            rules.post_likes(self.store, self.alice, 10)
        self.store.follows.add((1, 2))
        self.assertEqual(rules.post_likes(self.store, self.alice, 10), [])


if __name__ == "__main__":
    unittest.main()
