from __future__ import annotations

import binascii
import hashlib
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from .errors import ChallengeCancelled, ChallengeTimeout, InvalidChallengeError

logger = logging.getLogger(__name__)

DIGEST_SIZE = 32  # sha256
DEFAULT_CHECK_INTERVAL = 10_000


@dataclass(frozen=True, slots=True)
class Challenge:
    prefix: str
    target: bytes

    @classmethod
    def from_hex(cls, prefix: str, target_hex: str) -> "Challenge":
        try:
            target = bytes.fromhex(target_hex)
        except (TypeError, ValueError, binascii.Error) as e:
            raise InvalidChallengeError(f"Target is not a hex string: {target_hex!r}") from e
        if len(target) != DIGEST_SIZE:
            raise InvalidChallengeError(
                f"Target must decode to {DIGEST_SIZE} bytes, got {len(target)}"
            )
        return cls(prefix=prefix, target=target)


def verify_nonce(digest: bytes, target: bytes) -> bool:
    """
    True if digest <= target, compared byte by byte from index 0.

    The first differing byte decides; full equality accepts.
    """
    if len(digest) != len(target):
        return False

    for d_byte, t_byte in zip(digest, target):
        if d_byte > t_byte:
            return False
        if d_byte < t_byte:
            break
    return True


def solve_challenge(
    prefix: str,
    target_hex: str,
    *,
    cancel_event: threading.Event | None = None,
    timeout_s: float | None = None,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
) -> str:
    """
    Smallest nonce n >= 0 with sha256(f"{prefix}{n}") <= target, as a decimal string.

    Without `cancel_event` or `timeout_s` the search has no bound. Both are
    checked every `check_interval` nonces, starting before the first hash.

    Raises InvalidChallengeError (before hashing anything) for a bad target,
    ChallengeCancelled / ChallengeTimeout when the search is aborted.
    """
    challenge = Challenge.from_hex(prefix, target_hex)
    if check_interval < 1:
        raise ValueError("check_interval must be >= 1")

    started = time.monotonic()
    deadline = None if timeout_s is None else started + timeout_s
    logger.debug("Solving challenge prefix=%r target=%s", prefix, challenge.target.hex().upper())

    nonce = 0
    while True:
        if nonce % check_interval == 0:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Challenge search cancelled after %s nonces", nonce)
                raise ChallengeCancelled("Challenge search cancelled", nonces_tried=nonce)
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning("Challenge search timed out after %s nonces (%.1fs)", nonce, timeout_s)
                raise ChallengeTimeout(
                    f"No nonce found within {timeout_s}s", nonces_tried=nonce
                )

        digest = hashlib.sha256(f"{challenge.prefix}{nonce}".encode("utf-8")).digest()
        if verify_nonce(digest, challenge.target):
            logger.debug(
                "Challenge solved: nonce=%s after %s hashes in %.3fs",
                nonce,
                nonce + 1,
                time.monotonic() - started,
            )
            return str(nonce)

        nonce += 1


class ChallengeWorker:
    """
    Runs solve_challenge on its own thread so callers never block on the search.

    Each submit gets its own cancel event; cancel() aborts every search still
    queued or running, later submits start fresh.

        with ChallengeWorker(timeout_s=30) as worker:
            nonce = worker.submit(prefix, target).result()
    """

    def __init__(
        self,
        *,
        timeout_s: float | None = None,
        check_interval: int = DEFAULT_CHECK_INTERVAL,
    ):
        self.timeout_s = timeout_s
        self.check_interval = check_interval
        self._lock = threading.Lock()
        self._pending: set[threading.Event] = set()
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="challenge-solver")

    def __enter__(self) -> "ChallengeWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def submit(self, prefix: str, target_hex: str) -> Future[str]:
        # Validate up front so a bad target fails in the caller's thread.
        Challenge.from_hex(prefix, target_hex)
        event = threading.Event()
        with self._lock:
            self._pending.add(event)
        fut = self._pool.submit(
            solve_challenge,
            prefix,
            target_hex,
            cancel_event=event,
            timeout_s=self.timeout_s,
            check_interval=self.check_interval,
        )
        fut.add_done_callback(lambda _f: self._forget(event))
        return fut

    def _forget(self, event: threading.Event) -> None:
        with self._lock:
            self._pending.discard(event)

    def cancel(self) -> None:
        with self._lock:
            for event in self._pending:
                event.set()

    def shutdown(self) -> None:
        self.cancel()
        self._pool.shutdown(wait=True)
