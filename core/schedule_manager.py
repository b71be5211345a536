# core/schedule_manager.py

from datetime import date as date_type
from typing import List, Optional
from .errors import FormValidationError
from .models import CalendarEvent
from .stores import EventStore, InMemoryEventStore


class ScheduleManager:
    """Adds and looks up farming tasks by calendar date."""

    def __init__(self, store: Optional[EventStore] = None, seed: bool = True):
        self.store = store or InMemoryEventStore()
        if seed:
            today = date_type.today().isoformat()
            self.store.put(CalendarEvent(
                date=today,
                title="Apply fertilizer",
                description="Apply nitrogen-rich fertilizer to corn fields.",
            ))

    def add_event(self, date: str, title: str, description: str = "") -> CalendarEvent:
        if not title or not title.strip() or not date:
            raise FormValidationError("Please enter a title and a date for the task.")
        try:
            date_type.fromisoformat(date)
        except ValueError as e:
            raise FormValidationError("Please enter the date as YYYY-MM-DD.") from e

        event = CalendarEvent(date=date, title=title.strip(), description=description or "")
        self.store.put(event)
        return event

    def events_for(self, date: str) -> List[CalendarEvent]:
        return self.store.get(date)
