from __future__ import annotations

from .errors import (
    ChallengeAborted,
    ChallengeCancelled,
    ChallengeError,
    ChallengeTimeout,
    InvalidChallengeError,
)
from .solver import Challenge, ChallengeWorker, solve_challenge, verify_nonce

__all__ = [
    "Challenge",
    "ChallengeAborted",
    "ChallengeCancelled",
    "ChallengeError",
    "ChallengeTimeout",
    "ChallengeWorker",
    "InvalidChallengeError",
    "solve_challenge",
    "verify_nonce",
]
