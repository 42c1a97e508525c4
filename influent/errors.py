"""Errors raised by the InfluxDB client."""


class ClientError(Exception):
    """Base class of all client failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CommunicationError(ClientError):
    """The request never got a response (refused, DNS failure, timeout)."""


class InvalidSyntaxError(ClientError):
    """The server rejected the write body or the query (HTTP 400)."""


class CouldNotCompleteError(ClientError):
    """The write endpoint answered 200 instead of 204: the write did not complete."""


class UnexpectedResponseError(ClientError):
    """Any other HTTP status."""

    def __init__(self, status: int, body: str):
        super().__init__('Unexpected response. Status: %d; Body: "%s"' % (status, body))
        self.status = status
        self.body = body
