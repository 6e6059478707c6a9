import logging
import os

logger = logging.getLogger(__name__)

SPEED_MIN = 0.5
SPEED_MAX = 3.0


def _env_number(name, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, falling back to %r", name, raw, default)
        return default


def initial_speed() -> float:
    speed = _env_number("DSV_SPEED", 1.0, float)
    return max(SPEED_MIN, min(SPEED_MAX, speed))


def queue_capacity() -> int:
    capacity = _env_number("DSV_QUEUE_CAPACITY", 8, int)
    return capacity if capacity > 0 else 8


def stack_capacity() -> int:
    capacity = _env_number("DSV_STACK_CAPACITY", 4, int)
    return capacity if capacity > 0 else 4


def configure_logging(level=None):
    level = level or os.environ.get("DSV_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
