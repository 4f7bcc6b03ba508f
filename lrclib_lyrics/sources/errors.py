class LrcLibError(RuntimeError):
    pass


class NotFoundError(LrcLibError):
    pass


class NoResultError(LrcLibError):
    pass


class RequestError(LrcLibError):
    pass
