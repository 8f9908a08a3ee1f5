"""
LinkManager module for Shortlinks.

Responsibilities:
    - Create mappings from long URLs to random or caller-chosen shortcodes
    - Validate URLs, custom codes and validity periods
    - Resolve codes back to URLs and count accesses
    - Expire mappings lazily and delete them on request
    - Report every significant action to the log sink

Design notes:
    - The stored collection is the only source of truth. Every operation does
      a full read, mutates a local copy and, when something changed, a full
      write through MappingRepository. Nothing is cached between calls.
    - The expiration sweep runs at the start of create/resolve/list/get and
      persists immediately when it drops anything.
    - Resolve returns a single miss signal (None) whether the code never
      existed or has expired; only the log messages tell the two apart.
    - Random-code collisions are retried a bounded number of times per length,
      then the length widens (see strategies.draw_unique_code).
    - Log events are fire-and-forget: the manager never waits on the sink.

LLM Prompt Example:
    "Explain how a lazily-swept, TTL-based mapping store keeps at most one
    live record per shortcode without a background job."
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from numbers import Real
from typing import Callable, Iterable, List, Optional, Tuple

from ..config import settings
from ..errors import (
    CodeTakenError,
    InvalidCodeFormatError,
    InvalidUrlError,
    InvalidValidityError,
    ReservedCodeError,
)
from ..logsink.base import BaseLogSink
from ..logsink.memory import NullLogSink
from ..models import Mapping, ShortenResult
from ..storage.base import BaseStore
from ..storage.repository import MappingRepository
from .strategies import BaseStrategy, draw_unique_code, get_strategy_from_config
from .validators import is_valid_code, is_valid_url

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_LOCAL_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sweep(mappings: Iterable[Mapping], now: datetime) -> Tuple[List[Mapping], List[Mapping]]:
    """Split mappings into (live, expired); live keeps `expires_at > now`, order preserved."""
    live: List[Mapping] = []
    expired: List[Mapping] = []
    for m in mappings:
        (live if m.is_live(now) else expired).append(m)
    return live, expired


class LinkManager:
    """
    Coordinates the lifecycle of shortcode mappings.

    LLM Prompt Example:
        "Show how injecting the store, the log sink and the clock keeps a
        link manager testable against in-memory fakes."
    """

    def __init__(
        self,
        store: BaseStore,
        log_sink: Optional[BaseLogSink] = None,
        code_strategy: Optional[BaseStrategy] = None,
        base_url: Optional[str] = None,
        default_validity: Optional[int] = None,
        code_length: Optional[int] = None,
        max_attempts: Optional[int] = None,
        allowed_schemes: Optional[Iterable[str]] = None,
        storage_key: Optional[str] = None,
        clock: Optional[Clock] = None,
        reserved_codes: Optional[Iterable[str]] = None,
    ):
        """
        Initialize LinkManager with a store and optional collaborators.

        Args:
            store (BaseStore): Key-value store holding the mapping collection.
            log_sink (Optional[BaseLogSink]): Event sink; events are dropped when omitted.
            code_strategy (Optional[BaseStrategy]): Random code generator (from config when omitted).
            base_url (Optional[str]): Prefix of generated short links.
            default_validity (Optional[int]): Minutes used when create() gets no validity.
            code_length (Optional[int]): Initial length of generated codes.
            max_attempts (Optional[int]): Collision retries per code length.
            allowed_schemes (Optional[Iterable[str]]): URL scheme allow-list; empty accepts any.
            storage_key (Optional[str]): Key holding the collection in the store.
            clock (Optional[Clock]): Returns the current aware datetime.
            reserved_codes (Optional[Iterable[str]]): Codes that may never be issued,
                custom or generated (paths the HTTP surface serves itself).
        """
        self.log_sink = log_sink or NullLogSink()
        self.repository = MappingRepository(
            store, key=storage_key or settings.STORAGE_KEY, log_sink=self.log_sink
        )
        self.code_strategy = code_strategy or get_strategy_from_config()
        self.base_url = (base_url if base_url is not None else settings.BASE_URL).rstrip("/")
        self.default_validity = settings.DEFAULT_VALIDITY if default_validity is None else default_validity
        self.code_length = settings.CODE_LENGTH if code_length is None else code_length
        self.max_attempts = settings.MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.allowed_schemes = frozenset(
            settings.ALLOWED_SCHEMES if allowed_schemes is None else allowed_schemes
        )
        self.clock = clock or utc_now
        self.reserved_codes = frozenset(reserved_codes or ())

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    def _emit(self, level: str, message: str) -> None:
        logger.log(_LOCAL_LEVELS[level], message)
        self.log_sink.log("backend", level, "service", message)

    def _load_live(self, now: datetime) -> Tuple[List[Mapping], List[Mapping]]:
        """Load the collection, drop expired records and persist if any were dropped."""
        live, expired = sweep(self.repository.load(), now)
        if expired:
            self.repository.save(live)
            self._emit("INFO", f"Cleaned {len(expired)} expired mappings")
        return live, expired

    def _validity_minutes(self, validity_minutes) -> float:
        if validity_minutes is None:
            return self.default_validity
        if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, Real):
            raise InvalidValidityError(validity_minutes)
        if math.isnan(validity_minutes) or math.isinf(validity_minutes) or validity_minutes < 0:
            raise InvalidValidityError(validity_minutes)
        return validity_minutes

    def short_url(self, code: str) -> str:
        return f"{self.base_url}/{code}"

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        validity_minutes: Optional[float] = None,
    ) -> ShortenResult:
        """
        Create a mapping for `original_url`.

        Rules:
            - URL must be absolute (scheme allow-list applies when configured).
            - Validity is a non-negative number of minutes; 0 expires at once.
            - Validity must land before datetime.max.
            - A custom code must match [A-Za-z0-9]{3,10} and be unused.
            - Reserved codes are never issued, custom or generated.
            - Without a custom code a random one is drawn, avoiding every
              code still in the store after the sweep.

        Returns:
            ShortenResult: The stored mapping plus its short URL.

        Raises:
            InvalidUrlError, InvalidValidityError, InvalidCodeFormatError,
            CodeTakenError, ReservedCodeError, CodeSpaceExhaustedError
        """
        self._emit("INFO", "Starting URL shortening process")

        if not is_valid_url(original_url, self.allowed_schemes):
            self._emit("ERROR", "URL validation failed")
            raise InvalidUrlError(original_url)

        now = self.clock()
        try:
            minutes = self._validity_minutes(validity_minutes)
            # finite but past datetime.max (e.g. 1e12 minutes)
            try:
                expires_at = now + timedelta(minutes=minutes)
            except OverflowError:
                raise InvalidValidityError(validity_minutes) from None
        except InvalidValidityError:
            self._emit("ERROR", f"Invalid validity period: {validity_minutes!r}")
            raise

        if custom_code is not None and not is_valid_code(custom_code):
            self._emit("ERROR", "Custom shortcode is invalid")
            raise InvalidCodeFormatError(custom_code)
        if custom_code in self.reserved_codes:
            self._emit("ERROR", f"Shortcode is reserved: {custom_code}")
            raise ReservedCodeError(custom_code)

        mappings, _ = self._load_live(now)
        taken = {m.shortcode for m in mappings}

        if custom_code is not None:
            if custom_code in taken:
                self._emit("ERROR", "Shortcode already taken")
                raise CodeTakenError(custom_code)
            code = custom_code
        else:
            code = draw_unique_code(
                self.code_strategy,
                taken | self.reserved_codes,
                length=self.code_length,
                max_attempts=self.max_attempts,
            )

        mapping = Mapping(
            shortcode=code,
            original_url=original_url,
            created_at=now,
            expires_at=expires_at,
            access_count=0,
        )
        mappings.append(mapping)
        self.repository.save(mappings)

        self._emit("INFO", "URL shortened successfully")
        return ShortenResult(**mapping.model_dump(), short_url=self.short_url(code))

    def resolve(self, code: str) -> Optional[str]:
        """
        Return the original URL for a live code and count the access.

        Returns:
            Optional[str]: The URL, or None when the code is unknown or expired.
        """
        mapping = self.resolve_mapping(code)
        return mapping.original_url if mapping is not None else None

    def resolve_mapping(self, code: str) -> Optional[Mapping]:
        """Like resolve(), but return the mapping as stored after the access was counted."""
        self._emit("INFO", f"Attempting to resolve shortcode: {code}")

        now = self.clock()
        mappings, expired = self._load_live(now)

        for i, m in enumerate(mappings):
            if m.shortcode == code:
                mappings[i] = m.accessed()
                self.repository.save(mappings)
                self._emit("INFO", f"Successfully resolved shortcode {code} to {m.original_url}")
                return mappings[i]

        if any(m.shortcode == code for m in expired):
            self._emit("WARN", f"Shortcode expired: {code}")
        else:
            self._emit("WARN", f"Shortcode not found: {code}")
        return None

    def get(self, code: str) -> Optional[Mapping]:
        """Return the live mapping for `code` without counting an access."""
        mappings, _ = self._load_live(self.clock())
        for m in mappings:
            if m.shortcode == code:
                return m
        return None

    def list(self) -> List[Mapping]:
        """Return all live mappings in insertion order."""
        self._emit("INFO", "Retrieving all URL mappings")
        mappings, _ = self._load_live(self.clock())
        return mappings

    def delete(self, code: str) -> bool:
        """
        Remove the mapping for `code`, expired or not.

        Returns:
            bool: True if a record was removed.
        """
        self._emit("INFO", f"Attempting to delete mapping: {code}")

        mappings = self.repository.load()
        remaining = [m for m in mappings if m.shortcode != code]
        if len(remaining) == len(mappings):
            self._emit("WARN", f"Mapping not found for deletion: {code}")
            return False

        self.repository.save(remaining)
        self._emit("INFO", f"Successfully deleted mapping: {code}")
        return True
