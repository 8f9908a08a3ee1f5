"""
Strategies for shortcode generation in shortlinks.

Provided strategies:
- RandomStrategy: uniform random Base62 code of length L (default 6)

Collision handling lives in `draw_unique_code`, which is strategy-agnostic:
- Up to `max_attempts` draws per length
- On exhaustion the length widens by one, up to MAX_CODE_LENGTH (10)
- Past that, CodeSpaceExhaustedError

Configuration (via shortlinks.config.settings):
- CODE_LENGTH: default generated length (6; clamped 3..10)
- MAX_ATTEMPTS: draws per length before widening (16)

Notes:
- Generated codes always satisfy the custom-code format ([A-Za-z0-9]{3,10}).
- Codes are not cryptographically strong and must not act as secrets.
"""

import random
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Container, Optional

from shortlinks.config import settings
from shortlinks.errors import CodeSpaceExhaustedError

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 10


def _safe_len(length: Optional[int]) -> int:
    """Resolve desired code length from arg or config, clamped to [3, 10]."""
    L = int(length) if length is not None else int(settings.CODE_LENGTH)
    return max(MIN_CODE_LENGTH, min(MAX_CODE_LENGTH, L))


class BaseStrategy(ABC):
    """Abstract base for code generation strategies."""

    @abstractmethod
    def generate(self, *, length: Optional[int] = None) -> str:  # pragma: no cover
        """Return one candidate code of the requested length."""
        raise NotImplementedError


@dataclass
class RandomStrategy(BaseStrategy):
    """
    Independent uniform choice per character from the 62-char alphabet.
    Pass a seeded `random.Random` for reproducible sequences in tests.
    """
    length: int = 6
    rng: random.Random = field(default_factory=random.Random)

    def generate(self, *, length: Optional[int] = None) -> str:
        L = _safe_len(length if length is not None else self.length)
        return "".join(self.rng.choice(ALPHABET) for _ in range(L))


def draw_unique_code(
    strategy: BaseStrategy,
    taken: Container[str],
    length: int = 6,
    max_attempts: int = 16,
) -> str:
    """
    Draw codes until one is not in `taken`.

    Raises:
        CodeSpaceExhaustedError: If every attempt up to MAX_CODE_LENGTH collided.
    """
    attempts = 0
    for L in range(_safe_len(length), MAX_CODE_LENGTH + 1):
        for _ in range(max(1, max_attempts)):
            attempts += 1
            code = strategy.generate(length=L)
            if code not in taken:
                return code
    raise CodeSpaceExhaustedError(attempts)


def get_strategy_from_config() -> BaseStrategy:
    """Construct the default strategy with the configured code length."""
    return RandomStrategy(length=_safe_len(None))
