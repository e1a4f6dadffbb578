import json
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from conference_companion.app_data.client import AppDataClient
from conference_companion.app_data.manager import AppDataManager

mock_app_data_file = Path(__file__).parent / "mock_app_data.json"


@pytest.fixture
def mock_app_data():
    with mock_app_data_file.open(encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "cache" / "app-data.json"


@pytest.fixture
def image_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
async def mock_client(aiohttp_client, unused_tcp_port_factory, mock_app_data):
    async def app_data_handler(request):  # noqa: ARG001 (unused argument)
        return web.json_response(mock_app_data)

    async def image_handler(request):
        name = request.match_info["name"]
        if name == "sponsor-gold":
            return web.Response(status=404)
        return web.Response(body=f"image of {name}".encode())

    async def error_handler(request):  # noqa: ARG001 (unused argument)
        return web.Response(status=500)

    app = web.Application()
    app.router.add_get("/app-data", app_data_handler)
    app.router.add_get("/images/{name}", image_handler)
    app.router.add_get("/broken", error_handler)

    server = TestServer(app, port=unused_tcp_port_factory())
    return await aiohttp_client(server)


@pytest.fixture
def app_data_client(mock_client, cache_file, image_dir):
    return AppDataClient(
        api_url=str(mock_client.make_url("/app-data")),
        cache_file=cache_file,
        image_base_url=str(mock_client.make_url("/images")),
        image_dir=image_dir,
    )


@pytest.fixture
def broken_client(mock_client, cache_file, image_dir):
    return AppDataClient(
        api_url=str(mock_client.make_url("/broken")),
        cache_file=cache_file,
        image_base_url=str(mock_client.make_url("/images")),
        image_dir=image_dir,
    )


@pytest.fixture
def manager(app_data_client):
    return AppDataManager(app_data_client)
