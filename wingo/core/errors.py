class WingoError(Exception):
    pass


class EmptyBufferError(WingoError):
    """Raised when a forecast is requested before any record was ingested."""


class NotReadyError(WingoError):
    """Not enough history yet to serve predictions."""


class FeedError(WingoError):
    pass
