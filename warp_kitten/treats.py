import enum
import random
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .geometry import Viewport
from .settings import SimulationConfig
from .timers import Scheduler


class TreatEvent(enum.Enum):
    SPAWNED = "spawned"
    LANDED = "landed"
    EATEN = "eaten"
    EXPIRED = "expired"
    REMOVED = "removed"


@dataclass
class Treat:
    id: str
    x: float
    y: float
    vx: float
    vy: float
    is_eaten: bool = False
    is_landing: bool = False  # Has touched the floor at least once (not proof of rest)

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.vx, self.vy


class TreatPhysics:
    """Owns the live treats: tossing, falling, bouncing and clearing them away.

    Positions are window pixels, velocities pixels per 60 Hz frame. Delayed
    removals run on the shared scheduler. Every operation on an unknown id is
    a quiet no-op, since the kitten and the timers may act on a treat that is
    already gone.
    """

    def __init__(self, viewport: Viewport, scheduler: Scheduler,
                 config: Optional[SimulationConfig] = None, rng: Optional[random.Random] = None):
        self.viewport = viewport
        self.scheduler = scheduler
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random()
        self._treats: Dict[str, Treat] = {}
        self._timers: Dict[str, list] = {}
        self._listeners: List[Callable[[TreatEvent, Treat], None]] = []

    # --- events ---
    def subscribe(self, listener: Callable[[TreatEvent, Treat], None]):
        self._listeners.append(listener)

    def _emit(self, event: TreatEvent, treat: Treat):
        for listener in list(self._listeners):
            listener(event, treat)

    # --- bounds (recomputed every call, the window may have been resized) ---
    @property
    def floor(self) -> float:
        return self.viewport.height - self.config.floor_inset

    @property
    def right_wall(self) -> float:
        return self.viewport.width - self.config.wall_inset

    # --- lifecycle ---
    def spawn(self, origin_x: float, origin_y: float) -> str:
        cfg = self.config
        treat_id = uuid.uuid4().hex[:12]
        while treat_id in self._treats:
            treat_id = uuid.uuid4().hex[:12]
        treat = Treat(
            id=treat_id,
            x=origin_x - cfg.spawn_jitter,
            y=origin_y - cfg.spawn_jitter,
            vx=self.rng.uniform(-cfg.horizontal_speed_max, cfg.horizontal_speed_max),
            vy=-self.rng.uniform(cfg.launch_speed_min, cfg.launch_speed_max),
        )
        self._treats[treat_id] = treat
        self._timers[treat_id] = [self.scheduler.call_later(cfg.treat_lifetime, self._expire, treat_id)]
        self._emit(TreatEvent.SPAWNED, treat)
        return treat_id

    def _expire(self, treat_id: str):
        treat = self._treats.get(treat_id)
        if treat is None:
            return
        if not treat.is_eaten:
            self._emit(TreatEvent.EXPIRED, treat)
        self.remove(treat_id)

    def mark_eaten(self, treat_id: str) -> bool:
        treat = self._treats.get(treat_id)
        if treat is None or treat.is_eaten:
            return False
        treat.is_eaten = True
        self._timers.setdefault(treat_id, []).append(
            self.scheduler.call_later(self.config.treat_eat_delay, self.remove, treat_id))
        self._emit(TreatEvent.EATEN, treat)
        return True

    def remove(self, treat_id: str):
        treat = self._treats.pop(treat_id, None)
        for timer in self._timers.pop(treat_id, []):
            timer.cancel()
        if treat is not None:
            self._emit(TreatEvent.REMOVED, treat)

    def close(self):
        for timers in self._timers.values():
            for timer in timers:
                timer.cancel()
        self._timers.clear()
        self._treats.clear()
        self._listeners.clear()

    # --- queries ---
    def find(self, treat_id: str) -> Optional[Treat]:
        return self._treats.get(treat_id)

    def active_treats(self) -> Tuple[Treat, ...]:
        return tuple(self._treats.values())

    def __len__(self):
        return len(self._treats)

    # --- integration ---
    def tick(self, dt: float = 1.0):
        cfg = self.config
        floor = self.floor
        right = max(0.0, self.right_wall)
        landed = []
        for treat in self._treats.values():
            # Eaten treats stay frozen until their removal fires
            if treat.is_eaten:
                continue

            treat.vy += cfg.gravity * dt
            treat.x += treat.vx * dt
            treat.y += treat.vy * dt
            treat.vx *= cfg.friction ** dt

            # Bounce off floor
            if treat.y > floor:
                treat.y = floor
                treat.vy *= -cfg.bounce
                if not treat.is_landing:
                    treat.is_landing = True
                    landed.append(treat)
                # Stop very small bounces
                if abs(treat.vy) < cfg.rest_epsilon:
                    treat.vy = 0.0

            # Bounce off walls
            if treat.x < 0 or treat.x > right:
                treat.vx *= -cfg.bounce
                treat.x = max(0.0, min(right, treat.x))

        for treat in landed:
            self._emit(TreatEvent.LANDED, treat)
