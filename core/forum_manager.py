# core/forum_manager.py

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from .errors import FormValidationError
from .models import Author, ForumPost, ForumReply, User
from .stores import InMemoryPostStore, PostStore


def _seed_posts() -> List[ForumPost]:
    now = datetime.now(timezone.utc)
    john = Author(name="John Farmer", picture="https://api.dicebear.com/8.x/initials/svg?seed=John")
    jane = Author(name="Agri-Expert Jane", picture="https://api.dicebear.com/8.x/initials/svg?seed=Jane")
    maria = Author(name="Maria G.", picture="https://api.dicebear.com/8.x/initials/svg?seed=Maria")
    return [
        ForumPost(
            author=maria,
            title="Natural pesticide recommendations for aphids",
            content="My kale is getting overrun by aphids. Does anyone have effective organic or natural "
                    "pesticide solutions that have worked for them? I'd prefer not to use harsh chemicals.",
            timestamp=(now - timedelta(days=2)).isoformat(),
        ),
        ForumPost(
            author=john,
            title="Best time to plant tomatoes in a temperate climate?",
            content="I was wondering if anyone has advice on the optimal time to plant tomato seedlings "
                    "outdoors. I am in a zone 6 climate. Last year a late frost got me!",
            timestamp=(now - timedelta(days=1)).isoformat(),
            replies=[ForumReply(
                author=jane,
                content="A good rule of thumb is to wait about two weeks after your last expected frost date. "
                        "Keep an eye on the 10-day forecast!",
                timestamp=(now - timedelta(hours=12)).isoformat(),
            )],
        ),
    ]


class ForumManager:
    """Append-only forum: new posts go to the top, replies go to the end of a thread."""

    def __init__(self, store: Optional[PostStore] = None, seed: bool = True):
        self.store = store or InMemoryPostStore()
        if seed:
            # Oldest first, so the newest seed post ends up on top
            for post in _seed_posts():
                self.store.put(post)

    def posts(self) -> List[ForumPost]:
        return self.store.list()

    def get_post(self, post_id: str) -> Optional[ForumPost]:
        return self.store.get(post_id)

    def create_post(self, user: User, title: str, content: str) -> ForumPost:
        if not title or not title.strip() or not content or not content.strip():
            raise FormValidationError("Please enter a title and some content for your post.")
        post = ForumPost(author=Author.from_user(user), title=title.strip(), content=content.strip())
        self.store.put(post)
        return post

    def add_reply(self, post_id: str, user: User, content: str) -> ForumReply:
        if not content or not content.strip():
            raise FormValidationError("Please write a reply first.")
        post = self.store.get(post_id)
        if post is None:
            raise FormValidationError("That post no longer exists.")

        reply = ForumReply(author=Author.from_user(user), content=content.strip())
        self.store.put(post.model_copy(update={"replies": [*post.replies, reply]}))
        return reply
