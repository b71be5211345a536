# core/stores.py

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from .models import CalendarEvent, ForumPost


class EventStore(ABC):
    """Calendar events bucketed by date (YYYY-MM-DD)."""

    @abstractmethod
    def get(self, date: str) -> List[CalendarEvent]:
        ...

    @abstractmethod
    def put(self, event: CalendarEvent):
        ...


class PostStore(ABC):
    """Forum posts keyed by post id, newest first."""

    @abstractmethod
    def list(self) -> List[ForumPost]:
        ...

    @abstractmethod
    def get(self, post_id: str) -> Optional[ForumPost]:
        ...

    @abstractmethod
    def put(self, post: ForumPost):
        """Inserts a new post at the front, or replaces an existing one in place."""


class InMemoryEventStore(EventStore):
    def __init__(self):
        self._events: Dict[str, List[CalendarEvent]] = {}

    def get(self, date: str) -> List[CalendarEvent]:
        return list(self._events.get(date, []))

    def put(self, event: CalendarEvent):
        self._events.setdefault(event.date, []).append(event)
        print(f"---EVENT STORE: Saved '{event.title}' for {event.date}---")


class InMemoryPostStore(PostStore):
    def __init__(self):
        self._posts: List[ForumPost] = []

    def list(self) -> List[ForumPost]:
        return list(self._posts)

    def get(self, post_id: str) -> Optional[ForumPost]:
        return next((p for p in self._posts if p.id == post_id), None)

    def put(self, post: ForumPost):
        for i, existing in enumerate(self._posts):
            if existing.id == post.id:
                self._posts[i] = post
                print(f"---POST STORE: Updated post {post.id}---")
                return
        self._posts.insert(0, post)
        print(f"---POST STORE: Saved new post {post.id}---")
