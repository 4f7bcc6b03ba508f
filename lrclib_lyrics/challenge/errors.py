class ChallengeError(RuntimeError):
    pass


class InvalidChallengeError(ChallengeError, ValueError):
    pass


class ChallengeAborted(ChallengeError):
    def __init__(self, message: str, *, nonces_tried: int):
        super().__init__(message)
        self.nonces_tried = nonces_tried


class ChallengeCancelled(ChallengeAborted):
    pass


class ChallengeTimeout(ChallengeAborted):
    pass
