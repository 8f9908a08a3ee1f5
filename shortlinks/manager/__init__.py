from .link_manager import LinkManager, sweep, utc_now
from .strategies import RandomStrategy, draw_unique_code
from .validators import is_valid_code, is_valid_url

__all__ = [
    "LinkManager",
    "RandomStrategy",
    "draw_unique_code",
    "is_valid_code",
    "is_valid_url",
    "sweep",
    "utc_now",
]
