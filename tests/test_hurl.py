import asyncio
import base64
import json
import socket

import pytest
from aiohttp import web
from aiohttp import test_utils

from influent.hurl import AiohttpHurl, Auth, HurlError, Method, Request, Response, merge_query


def test_merge_query_keeps_existing_pairs_first():
    url = merge_query("http://localhost:8086/write?rp=autogen", {"db": "test", "precision": "s"})

    assert url == "http://localhost:8086/write?rp=autogen&db=test&precision=s"


def test_merge_query_encodes_values():
    url = merge_query("http://localhost:8086/query", {"q": "select value from m"})

    assert url == "http://localhost:8086/query?q=select+value+from+m"


def test_merge_query_without_pairs():
    assert merge_query("http://localhost:8086/query", None) == "http://localhost:8086/query"


def test_response_str_is_body():
    assert str(Response(204, "Ok")) == "Ok"


async def _echo(request):
    body = await request.text()
    status = int(request.query.get("status", "200"))
    if status == 204:
        return web.Response(status=204)
    return web.json_response(
        {
            "method": request.method,
            "query": list(request.query.items()),
            "auth": request.headers.get("Authorization", ""),
            "body": body,
        },
        status=status,
    )


def _run_with_server(make_request):
    async def scenario():
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", _echo)
        async with test_utils.TestServer(app) as server:
            return await make_request(str(server.make_url("/")).rstrip("/"))

    return asyncio.run(scenario())


def test_aiohttp_hurl_no_content():
    async def make_request(base_url):
        return await AiohttpHurl().request(
            Request(
                method=Method.POST,
                url=base_url + "/write?rp=autogen",
                auth=Auth("gobwas", "1234"),
                query={"db": "test", "status": "204"},
                body="m v=1i",
            )
        )

    response = _run_with_server(make_request)

    assert response.status == 204


def test_aiohttp_hurl_echoes_request():
    async def make_request(base_url):
        return await AiohttpHurl().request(
            Request(
                method=Method.POST,
                url=base_url + "/write?rp=autogen",
                auth=Auth("gobwas", "1234"),
                query={"db": "test"},
                body="m v=1i",
            )
        )

    response = _run_with_server(make_request)

    assert response.status == 200
    echoed = json.loads(response.body)
    assert echoed["method"] == "POST"
    assert echoed["query"] == [["rp", "autogen"], ["db", "test"]]
    assert echoed["auth"] == "Basic " + base64.b64encode(b"gobwas:1234").decode()
    assert echoed["body"] == "m v=1i"


def test_aiohttp_hurl_get_without_auth():
    async def make_request(base_url):
        return await AiohttpHurl().request(
            Request(method=Method.GET, url=base_url + "/query", query={"q": "show databases"})
        )

    response = _run_with_server(make_request)

    echoed = json.loads(response.body)
    assert echoed["method"] == "GET"
    assert echoed["auth"] == ""
    assert echoed["query"] == [["q", "show databases"]]


def _unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_aiohttp_hurl_connection_refused():
    request = Request(method=Method.GET, url="http://127.0.0.1:%d/query" % _unused_port())

    with pytest.raises(HurlError):
        asyncio.run(AiohttpHurl(timeout_s=5.0).request(request))


def test_aiohttp_hurl_bad_url():
    request = Request(method=Method.GET, url="not a url")

    with pytest.raises(HurlError):
        asyncio.run(AiohttpHurl().request(request))
