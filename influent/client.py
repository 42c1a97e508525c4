"""
Async InfluxDB 1.x HTTP client.

Supports:
  - POST /write with Line Protocol bodies, split into batches
  - GET /query, returning the raw response body
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .errors import (
    ClientError,
    CommunicationError,
    CouldNotCompleteError,
    InvalidSyntaxError,
    UnexpectedResponseError,
)
from .hurl import AiohttpHurl, Auth, Hurl, HurlError, Method, Request, Response
from .point import Point, encode_point

logger = logging.getLogger(__name__)

MAX_BATCH = 5000


class Precision(enum.Enum):
    """Time unit of written timestamps (`precision`) or returned ones (`epoch`)."""

    NANOSECONDS = "n"
    MICROSECONDS = "u"
    MILLISECONDS = "ms"
    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
    database: str


@dataclass(frozen=True)
class Options:
    """Optional client defaults; unset values leave the request untouched."""

    max_batch: Optional[int] = None
    precision: Optional[Precision] = None
    epoch: Optional[Precision] = None
    chunk_size: Optional[int] = None


def check_write_response(response: Response) -> None:
    """Raise unless the write endpoint answered 204 No Content."""
    if response.status == 204:
        return
    if response.status == 200:
        raise CouldNotCompleteError(response.body)
    if response.status == 400:
        raise InvalidSyntaxError(response.body)
    raise UnexpectedResponseError(response.status, response.body)


def check_query_response(response: Response) -> str:
    """Return the query body for 200, raise otherwise."""
    if response.status == 200:
        return response.body
    if response.status == 400:
        raise InvalidSyntaxError(response.body)
    raise UnexpectedResponseError(response.status, response.body)


class InfluxClient:
    """
    Client for a single InfluxDB host and database.

    The client holds no mutable state while requests run, so one instance can
    serve concurrent callers. Swapping the transport with set_hurl() must
    happen before that.
    """

    def __init__(
        self,
        credentials: Credentials,
        host: str,
        *,
        hurl: Optional[Hurl] = None,
        max_batch: int = MAX_BATCH,
        options: Optional[Options] = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: Username, password and target database.
            host: Base URL, e.g. "http://localhost:8086".
            hurl: Transport; defaults to AiohttpHurl().
            max_batch: Maximum points per write request.
            options: Defaults for precision, epoch and query chunking.
                options.max_batch overrides max_batch when set.
        """
        self.options = options or Options()
        if self.options.max_batch is not None:
            max_batch = self.options.max_batch
        if max_batch < 1:
            raise ValueError("max_batch must be positive")

        self.credentials = credentials
        self.host = host
        self.max_batch = max_batch
        self._hurl = hurl if hurl is not None else AiohttpHurl()

    def set_hurl(self, hurl: Hurl) -> None:
        """Replace the transport. Not safe while requests are in flight."""
        self._hurl = hurl

    async def write_one(self, point: Point, precision: Optional[Precision] = None) -> None:
        """Write a single point."""
        await self.write_many([point], precision)

    async def write_many(self, points: Iterable[Point], precision: Optional[Precision] = None) -> None:
        """
        Write points in batches of at most max_batch, one request per batch.

        Batches are sent in order and the first failing batch raises
        immediately; later batches are not sent, and batches already accepted
        by the server stay written.
        """
        if precision is None:
            precision = self.options.precision

        points = list(points)
        total = len(points)
        for start in range(0, total, self.max_batch):
            chunk = points[start : start + self.max_batch]
            body = "\n".join(encode_point(point) for point in chunk)
            logger.debug(
                "writing points %d-%d of %d to %s", start, start + len(chunk), total, self.host
            )
            response = await self._send(self._write_request(body, precision))
            try:
                check_write_response(response)
            except ClientError:
                logger.warning(
                    "write of points %d-%d failed with HTTP %d", start, start + len(chunk), response.status
                )
                raise

    async def query(self, q: str, epoch: Optional[Precision] = None) -> str:
        """Run a query and return the raw response body."""
        if epoch is None:
            epoch = self.options.epoch

        query: Dict[str, str] = {"db": self.credentials.database, "q": q}
        if epoch is not None:
            query["epoch"] = str(epoch)
        if self.options.chunk_size is not None:
            query["chunked"] = "true"
            query["chunk_size"] = str(self.options.chunk_size)

        request = Request(
            method=Method.GET,
            url=self.host + "/query",
            auth=self._query_auth(),
            query=query,
        )
        response = await self._send(request)
        return check_query_response(response)

    def _write_request(self, body: str, precision: Optional[Precision]) -> Request:
        """Build the POST /write request for one batch."""
        query = {"db": self.credentials.database}
        if precision is not None:
            query["precision"] = str(precision)
        return Request(
            method=Method.POST,
            url=self.host + "/write",
            auth=Auth(self.credentials.username, self.credentials.password),
            query=query,
            body=body,
        )

    def _query_auth(self) -> Optional[Auth]:
        """Basic auth for queries, omitted when no username and password are set."""
        if self.credentials.username == "" and self.credentials.password == "":
            return None
        return Auth(self.credentials.username, self.credentials.password)

    async def _send(self, request: Request) -> Response:
        """Dispatch through the transport, mapping transport failures."""
        try:
            return await self._hurl.request(request)
        except HurlError as exc:
            logger.warning("%s %s failed: %s", request.method.value, request.url, exc)
            raise CommunicationError(str(exc)) from exc
