"""
Build clients from the environment.

Keys (via python-decouple, so a .env file works too):
- INFLUXDB_ADDRESS: base URL, e.g. http://localhost:8086
- INFLUXDB_USERNAME, INFLUXDB_PASSWORD
- INFLUXDB_BUCKET: database name
- INFLUXDB_MAX_BATCH: optional, points per write request (default: 5000)

A missing required key raises decouple.UndefinedValueError.
"""

from typing import Optional

from decouple import config

from .client import MAX_BATCH, Credentials, InfluxClient
from .hurl import Hurl


def _var(key, **kwargs):
    return config("INFLUXDB_" + key, **kwargs)


def credentials_from_env() -> Credentials:
    return Credentials(
        username=_var("USERNAME"),
        password=_var("PASSWORD"),
        database=_var("BUCKET"),
    )


def client_from_env(hurl: Optional[Hurl] = None) -> InfluxClient:
    """Create an InfluxClient configured entirely from INFLUXDB_* variables."""
    return InfluxClient(
        credentials_from_env(),
        _var("ADDRESS"),
        hurl=hurl,
        max_batch=_var("MAX_BATCH", default=MAX_BATCH, cast=int),
    )
