import enum
import random
from dataclasses import dataclass
from typing import Optional

from .geometry import Viewport, clamp, distance, normalize
from .log import log
from .settings import (
    CLICK_BOUNCE,
    CLICK_BOUNCE_BOTTOM,
    CLICK_BOUNCE_TIME,
    CLICK_BOUNCE_TOP,
    CLICK_SPEECH,
    EXCITED_SPEECH,
    SATISFIED_SPEECHES,
    SimulationConfig,
)
from .speech import SpeechBubble
from .timers import Scheduler
from .treats import Treat, TreatPhysics


class KittenState(enum.Enum):
    IDLE = "idle"
    CHASING = "chasing"
    EATING = "eating"


@dataclass
class Kitten:
    # Position in percent of the viewport
    x: float = 50.0
    y: float = 50.0
    state: KittenState = KittenState.IDLE
    target_id: Optional[str] = None  # Only set while chasing; re-resolved every tick


class PursuitController:
    """Decides what the kitten does on its own cadence.

    Idle: wander to a random spot every few seconds and look for a settled
    treat within reach. Chasing: step toward the target, re-checking it still
    exists every tick. Eating: hold still for a moment, then go idle again.

    Each state owns its timers; leaving a state cancels them.
    """

    def __init__(self, engine: TreatPhysics, viewport: Viewport, scheduler: Scheduler,
                 config: Optional[SimulationConfig] = None, rng: Optional[random.Random] = None,
                 kitten: Optional[Kitten] = None):
        self.engine = engine
        self.viewport = viewport
        self.scheduler = scheduler
        self.config = config or engine.config
        self.rng = rng or random.Random()
        self.kitten = kitten or Kitten()
        self.speech = SpeechBubble(scheduler)
        self._cadence = None
        self._state_timers = []
        self._bounce_timer = None

    @property
    def state(self) -> KittenState:
        return self.kitten.state

    # --- lifecycle ---
    def start(self):
        if self._cadence is not None:
            return
        self._cadence = self.scheduler.call_every(self.config.pursuit_interval, self.update)
        self._enter(KittenState.IDLE)

    def close(self):
        if self._cadence is not None:
            self._cadence.cancel()
            self._cadence = None
        self._cancel_state_timers()
        if self._bounce_timer is not None:
            self._bounce_timer.cancel()
            self._bounce_timer = None
        self.speech.close()

    # --- state machine ---
    def _cancel_state_timers(self):
        for timer in self._state_timers:
            timer.cancel()
        self._state_timers = []

    def _enter(self, state: KittenState, target_id: Optional[str] = None):
        self._cancel_state_timers()
        previous = self.kitten.state
        self.kitten.state = state
        self.kitten.target_id = target_id if state is KittenState.CHASING else None
        if state is KittenState.IDLE:
            self._schedule_wander()
        elif state is KittenState.EATING:
            self._state_timers.append(
                self.scheduler.call_later(self.config.eating_duration, self._finish_eating))
        if previous is not state:
            log(f"Kitten: {previous.value} -> {state.value}")

    def update(self):
        if self.kitten.state is KittenState.IDLE:
            self._update_idle()
        elif self.kitten.state is KittenState.CHASING:
            self._update_chasing()
        # Eating just waits for its timer

    def _update_idle(self):
        target = self.find_target()
        if target is None:
            return
        self._enter(KittenState.CHASING, target.id)
        self.speech.say(EXCITED_SPEECH, self.config.excited_speech_duration)

    def _update_chasing(self):
        treat = self.engine.find(self.kitten.target_id) if self.kitten.target_id else None
        if treat is None or treat.is_eaten:
            # Someone else got it, or it expired
            self._enter(KittenState.IDLE)
            return

        kx, ky = self.pixel_position()
        dx = treat.x - kx
        dy = treat.y - ky
        dist = distance(treat.x, treat.y, kx, ky)
        if dist > self.config.eat_distance:
            ux, uy = normalize(dx, dy)
            inset = self.config.chase_edge_inset
            w, h = self.viewport.width, self.viewport.height
            nx = clamp(kx + ux * self.config.chase_step, inset, max(inset, w - inset))
            ny = clamp(ky + uy * self.config.chase_step, inset, max(inset, h - inset))
            self.kitten.x, self.kitten.y = self.viewport.to_percent(nx, ny)
            return

        self.engine.mark_eaten(treat.id)
        self._enter(KittenState.EATING)
        self.speech.say(self.rng.choice(SATISFIED_SPEECHES), self.config.satisfied_speech_duration)

    def _finish_eating(self):
        self._enter(KittenState.IDLE)
        self.speech.reset()

    # --- wandering ---
    def _schedule_wander(self):
        delay = self.rng.uniform(self.config.wander_interval_min, self.config.wander_interval_max)
        self._state_timers = [t for t in self._state_timers if t.active]
        self._state_timers.append(self.scheduler.call_later(delay, self._wander))

    def _wander(self):
        if self.kitten.state is not KittenState.IDLE:
            return
        self.move_to_random_position()
        self._schedule_wander()

    def move_to_random_position(self):
        # Keep kitten within safe bounds
        lo, hi = self.config.wander_margin_min, self.config.wander_margin_max
        self.kitten.x = self.rng.uniform(lo, hi)
        self.kitten.y = self.rng.uniform(lo, hi)

    # --- targeting ---
    def is_settled(self, treat: Treat) -> bool:
        return not treat.is_eaten and (treat.is_landing or abs(treat.vy) < self.config.settled_speed)

    def find_target(self) -> Optional[Treat]:
        """Nearest settled treat within the pursuit radius; ties go to the first one scanned."""
        kx, ky = self.pixel_position()
        best = None
        best_dist = self.config.pursuit_radius
        for treat in self.engine.active_treats():
            if not self.is_settled(treat):
                continue
            d = distance(treat.x, treat.y, kx, ky)
            if d > best_dist:
                continue
            if best is None or d < best_dist:
                best, best_dist = treat, d
        return best

    def pixel_position(self):
        # Not cached: the window may have been resized since the last tick
        return self.viewport.to_pixels(self.kitten.x, self.kitten.y)

    # --- pointer interaction ---
    def hit_test(self, px: float, py: float, center=None) -> bool:
        """True when (px, py) lands on the kitten.

        ``center`` is where the kitten is actually drawn, in pixels; the shell
        passes it while the sprite is still gliding toward the model position.
        """
        kx, ky = center if center is not None else self.pixel_position()
        return distance(px, py, kx, ky) <= self.config.kitten_radius

    def on_kitten_click(self):
        self.speech.say(CLICK_SPEECH, self.config.click_speech_duration)

        # Give kitten a little bounce when clicked
        lifted = 0.0
        if self._bounce_timer is not None:
            # A second click mid-air lands both bounces together
            self._bounce_timer.cancel()
            if self._bounce_timer.args[1] == self.kitten.y:
                lifted = self._bounce_timer.args[0]
        before = self.kitten.y
        self.kitten.y = max(CLICK_BOUNCE_TOP, before - CLICK_BOUNCE)
        lifted += before - self.kitten.y
        self._bounce_timer = self.scheduler.call_later(
            CLICK_BOUNCE_TIME, self._land_bounce, lifted, self.kitten.y)

    def _land_bounce(self, lifted: float, bounced_y: float):
        self._bounce_timer = None
        # Only land if nothing (chase step, wander jump) has moved the kitten since
        if self.state is not KittenState.IDLE or self.kitten.y != bounced_y:
            return
        self.kitten.y = min(CLICK_BOUNCE_BOTTOM, self.kitten.y + lifted)
