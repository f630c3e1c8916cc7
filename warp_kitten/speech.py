from .settings import DEFAULT_SPEECH
from .timers import Scheduler


class SpeechBubble:
    """The kitten's one speech slot: a new line always replaces the current one."""

    def __init__(self, scheduler: Scheduler, default_text: str = DEFAULT_SPEECH):
        self.scheduler = scheduler
        self.default_text = default_text
        self.text = default_text
        self.visible = False
        self.expires_at = None
        self._timer = None

    def say(self, text: str, duration: float):
        if self._timer is not None:
            self._timer.cancel()
        self.text = text
        self.visible = True
        self.expires_at = self.scheduler.now + duration
        self._timer = self.scheduler.call_later(duration, self._hide)

    def _hide(self):
        self.visible = False
        self.expires_at = None
        self._timer = None

    def reset(self):
        if self._timer is not None:
            self._timer.cancel()
        self._hide()
        self.text = self.default_text

    def close(self):
        self.reset()
