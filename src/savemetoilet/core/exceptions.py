class ToiletClientError(Exception):
    """Base toilet client exception."""


class UpstreamError(ToiletClientError):
    """Raised when a Seoul open data request failed."""

    kind = "upstream"


class UpstreamTransportError(UpstreamError):
    """Raised when the request never produced a response."""

    kind = "transport"


class UpstreamTimeoutError(UpstreamTransportError):
    """Raised when connecting or reading timed out."""

    kind = "timeout"


class UpstreamHttpStatusError(UpstreamError):
    kind = "http_status"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamPayloadError(UpstreamError):
    """Raised when the payload does not match the service envelope."""

    kind = "malformed"


class FetchInterrupted(ToiletClientError):
    """Raised when the pacing wait between pages was cancelled."""

    kind = "interrupted"
