from .point import Value, String, Float, Integer, Boolean, Point, build_line_protocol, encode_point, escape
from .hurl import AiohttpHurl, Hurl, HurlError, Request, Response
from .errors import (
    ClientError,
    CommunicationError,
    CouldNotCompleteError,
    InvalidSyntaxError,
    UnexpectedResponseError,
)
from .client import Credentials, InfluxClient, Options, Precision
from .env import client_from_env, credentials_from_env

__all__ = [
    "Value",
    "String",
    "Float",
    "Integer",
    "Boolean",
    "Point",
    "build_line_protocol",
    "encode_point",
    "escape",
    "AiohttpHurl",
    "Hurl",
    "HurlError",
    "Request",
    "Response",
    "ClientError",
    "CommunicationError",
    "CouldNotCompleteError",
    "InvalidSyntaxError",
    "UnexpectedResponseError",
    "Credentials",
    "InfluxClient",
    "Options",
    "Precision",
    "client_from_env",
    "credentials_from_env",
]
