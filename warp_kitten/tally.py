from .treats import TreatEvent


class TreatTally:
    """Counts treats for the HUD; subscribe it to a TreatPhysics engine."""

    def __init__(self):
        self.thrown = 0
        self.eaten = 0
        self.expired = 0
        self.on_screen = 0

    def __call__(self, event, treat):
        if event is TreatEvent.SPAWNED:
            self.thrown += 1
            self.on_screen += 1
        elif event is TreatEvent.EATEN:
            self.eaten += 1
        elif event is TreatEvent.EXPIRED:
            self.expired += 1
        elif event is TreatEvent.REMOVED:
            self.on_screen = max(0, self.on_screen - 1)

    def summary(self) -> str:
        return f"thrown={self.thrown}, eaten={self.eaten}, expired={self.expired}, on_screen={self.on_screen}"
