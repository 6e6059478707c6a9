from PyQt5.QtCore import QObject, pyqtSignal

from core import settings


class GlobalController(QObject):
    """
    Holds global playback speed and emits changes so that every animation
    can adjust its duration consistently.
    """

    speedChanged = pyqtSignal(float)

    def __init__(self, speed=None):
        super().__init__()
        self._speed = settings.initial_speed() if speed is None else self._clamp(speed)

    @property
    def speed(self) -> float:
        return self._speed

    @staticmethod
    def _clamp(value: float) -> float:
        return max(settings.SPEED_MIN, min(settings.SPEED_MAX, value))

    def set_speed(self, value: float):
        """Clamp and broadcast speed multiplier."""
        value = self._clamp(value)
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """Higher speed → shorter duration, never below 1 ms."""
        return max(1, int(base_ms / self._speed))
