from datetime import date

import pytest

from core.errors import FormValidationError
from core.forum_manager import ForumManager
from core.models import User
from core.schedule_manager import ScheduleManager
from core.stores import InMemoryEventStore

FARMER = User(name="Ravi Kumar", email="ravi@example.com", picture="https://example.com/ravi.png")


# --- Scheduler ---

def test_event_is_only_returned_for_its_date():
    schedule = ScheduleManager(seed=False)
    schedule.add_event("2024-05-02", "Irrigate paddy", "")
    event = schedule.add_event("2024-05-01", "Spray neem oil", "Kale beds only")

    assert schedule.events_for("2024-05-01") == [event]
    assert [e.title for e in schedule.events_for("2024-05-02")] == ["Irrigate paddy"]
    assert schedule.events_for("2024-05-03") == []


def test_events_on_same_date_keep_insertion_order():
    schedule = ScheduleManager(seed=False)
    schedule.add_event("2024-05-01", "Weed", "")
    schedule.add_event("2024-05-01", "Mulch", "")
    assert [e.title for e in schedule.events_for("2024-05-01")] == ["Weed", "Mulch"]


def test_returned_bucket_cannot_mutate_store():
    schedule = ScheduleManager(seed=False)
    schedule.add_event("2024-05-01", "Weed", "")
    schedule.events_for("2024-05-01").clear()
    assert len(schedule.events_for("2024-05-01")) == 1


@pytest.mark.parametrize("event_date, title", [("", "Weed"), ("2024-05-01", ""), ("2024-05-01", "  "), ("01/05/2024", "Weed")])
def test_event_requires_title_and_valid_date(event_date, title):
    with pytest.raises(FormValidationError):
        ScheduleManager(seed=False).add_event(event_date, title, "")


def test_scheduler_is_seeded_for_today():
    schedule = ScheduleManager(store=InMemoryEventStore())
    assert [e.title for e in schedule.events_for(date.today().isoformat())] == ["Apply fertilizer"]


# --- Forum ---

def test_new_post_goes_first():
    forum = ForumManager()
    post = forum.create_post(FARMER, "Soil pH for blueberries?", "Mine is 6.8, too high?")

    posts = forum.posts()
    assert posts[0] == post
    assert posts[0].author.name == "Ravi Kumar"
    assert len(posts) == 3


def test_reply_only_changes_its_own_post():
    forum = ForumManager()
    before = {p.id: len(p.replies) for p in forum.posts()}
    target = forum.posts()[1]

    forum.add_reply(target.id, FARMER, "Try a sulphur amendment.")

    after = {p.id: len(p.replies) for p in forum.posts()}
    assert after[target.id] == before[target.id] + 1
    assert all(after[pid] == count for pid, count in before.items() if pid != target.id)
    assert forum.get_post(target.id).replies[-1].content == "Try a sulphur amendment."


def test_reply_keeps_post_position():
    forum = ForumManager()
    order = [p.id for p in forum.posts()]
    forum.add_reply(order[-1], FARMER, "Same here!")
    assert [p.id for p in forum.posts()] == order


def test_seed_posts_are_newest_first():
    titles = [p.title for p in ForumManager().posts()]
    assert titles == [
        "Best time to plant tomatoes in a temperate climate?",
        "Natural pesticide recommendations for aphids",
    ]


def test_reply_validation():
    forum = ForumManager()
    with pytest.raises(FormValidationError):
        forum.add_reply("missing-post", FARMER, "Hello")
    with pytest.raises(FormValidationError):
        forum.add_reply(forum.posts()[0].id, FARMER, "   ")
    with pytest.raises(FormValidationError):
        forum.create_post(FARMER, "", "content")
