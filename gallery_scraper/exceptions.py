"""Errors raised by the listing parser."""


class ParseError(ValueError):
    """Raised when a listing page is missing a structural element.

    Only the pagination control (without the "no hits" marker) and the
    item grid are structural. The offending page body is kept on
    `body` so callers can dump it for diagnostics.
    """

    def __init__(self, message: str, body: str):
        super().__init__(message)
        self.body = body
