"""
HTTP transport used by the client.

The client only talks to a `Hurl`: any object with an async
`request(request) -> Response` method that raises `HurlError` when no
response could be obtained. `AiohttpHurl` is the default implementation;
tests substitute their own.
"""

import asyncio
import enum
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

import aiohttp
from yarl import URL


class Method(enum.Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class Auth:
    """Basic authentication credentials."""

    username: str
    password: str


@dataclass(frozen=True)
class Request:
    method: Method
    url: str
    auth: Optional[Auth] = None
    query: Optional[Mapping[str, str]] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class Response:
    status: int
    body: str

    def __str__(self):
        return self.body


class HurlError(Exception):
    """Transport-level failure; the message is the transport's error text."""


class Hurl(Protocol):
    async def request(self, request: Request) -> Response:
        ...


def merge_query(url: str, query: Optional[Mapping[str, str]]) -> str:
    """Append `query` pairs after any pairs already present in `url`."""
    if not query:
        return url
    parsed = URL(url)
    pairs = list(parsed.query.items()) + [(key, str(value)) for key, value in query.items()]
    return str(parsed.with_query(pairs))


class AiohttpHurl:
    """Transport backed by aiohttp; opens a short-lived session per request."""

    def __init__(self, *, timeout_s: float = 10.0):
        self._timeout = aiohttp.ClientTimeout(total=timeout_s)

    async def request(self, request: Request) -> Response:
        """Perform one request/response exchange."""
        try:
            url = merge_query(request.url, request.query)
        except ValueError as exc:
            raise HurlError("could not parse url: %s" % exc) from exc

        auth = None
        if request.auth is not None:
            auth = aiohttp.BasicAuth(request.auth.username, request.auth.password)

        data = (request.body or "").encode("utf-8")
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(
                    request.method.value, URL(url, encoded=True), data=data, auth=auth
                ) as response:
                    body = await response.text()
                    return Response(status=response.status, body=body)
        except asyncio.TimeoutError as exc:
            raise HurlError("request timed out: %s %s" % (request.method.value, request.url)) from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise HurlError(str(exc)) from exc
