# views/base.py

from typing import Any, Callable, Optional
from core.errors import PlantsDoctorError, UNKNOWN_ERROR_MESSAGE

IDLE, LOADING, ERROR, READY = "idle", "loading", "error", "ready"


class ViewState:
    """Loading / error / result state owned by a single view."""

    def __init__(self):
        self.status = IDLE
        self.error: Optional[str] = None
        self.result: Any = None

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    def start(self):
        self.status, self.error, self.result = LOADING, None, None

    def fail(self, message: str):
        self.status, self.error, self.result = ERROR, message, None

    def succeed(self, result: Any):
        self.status, self.error, self.result = READY, None, result

    def reset(self):
        self.status, self.error, self.result = IDLE, None, None


class FeatureView:
    """A view that runs one gateway operation per user action."""

    name = "view"

    def __init__(self):
        self.state = ViewState()

    def _run(self, action: Callable, *args, state: Optional[ViewState] = None) -> bool:
        """
        The view's only catch boundary. Known errors show their own message;
        anything else is logged and shown as a generic error. Never retries.
        """
        state = state or self.state
        if state.is_loading:
            return False

        print(f"---{self.name.upper()} VIEW: {getattr(action, '__name__', 'action')}---")
        state.start()
        try:
            result = action(*args)
        except PlantsDoctorError as e:
            print(f"---{self.name.upper()} VIEW: {type(e).__name__}: {e.user_message}---")
            state.fail(e.user_message)
            return False
        except Exception as e:
            print(f"Error in {type(self).__name__}: {type(e).__name__} - {e}")
            state.fail(UNKNOWN_ERROR_MESSAGE)
            return False

        state.succeed(result)
        return True
