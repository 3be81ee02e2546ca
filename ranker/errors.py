"""Exceptions raised by the outbound-service layer."""


class UpstreamError(Exception):
    """A third-party service (Spotify catalog, image host) failed.

    ``message`` is safe to show to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
