"""Shared fixtures: sample episode pages and a mock lineup site."""

import asyncio
import socket
import threading
import time
from collections.abc import Generator
from contextlib import closing
from typing import Optional, Union

import pytest
from aiohttp import web


DEFAULT_STAFF = (
    "脚本：成田良美<br>"
    "絵コンテ：佐藤順一<br>"
    "演出：境宗久<br>"
    "作画：稲上晃<br>"
    "美術：田尻健一"
)


def make_episode_html(
    episode_id: str = "第1話",
    subtitle: str = "【「ひろがるスカイ！とびこんでプリキュア！」】",
    date: str = "2023年4月2日",
    staff: Optional[str] = DEFAULT_STAFF,
) -> str:
    """Build an episode page shaped like the lineup site's story caption."""
    return f"""<!DOCTYPE html>
<html lang="ja">
<head><meta charset="utf-8"><title>{episode_id}</title></head>
<body>
<div id="contents">
  <div id="story_caption">
    <h1 class="story_caption_title"><span class="episode_id">{episode_id}</span>{subtitle}</h1>
    <p class="story_caption_date">{date}<span>放送</span></p>
    <p class="story_caption_staff">{staff}</p>
  </div>
</div>
</body>
</html>"""


def find_free_port() -> int:
    """Find a free port on localhost."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


def create_lineup_app(pages: dict[str, list[Union[str, bytes]]]) -> web.Application:
    """Serve pages[slug][n - 1] at /ja/tv/{slug}/episode/{n}/, 404 otherwise.

    Bytes bodies are sent as-is, still labelled utf-8.
    """

    async def episode_page(request: web.Request) -> web.Response:
        request.app["requests"].append(request.path)
        slug = request.match_info["slug"]
        page = int(request.match_info["page"])
        bodies = pages.get(slug, [])
        if page < 1 or page > len(bodies):
            raise web.HTTPNotFound()
        body = bodies[page - 1]
        if isinstance(body, bytes):
            return web.Response(body=body, content_type="text/html", charset="utf-8")
        return web.Response(text=body, content_type="text/html", charset="utf-8")

    app = web.Application()
    app["requests"] = []
    app.router.add_get("/ja/tv/{slug}/episode/{page:\\d+}/", episode_page)
    return app


class AioHttpTestServer:
    """Run an aiohttp application in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._runner: Optional[web.AppRunner] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Base URL of the server."""
        return f"http://{self.host}:{self.port}"

    @property
    def lineup_url(self) -> str:
        """Equivalent of the lineup site's /ja/tv root."""
        return f"{self.url}/ja/tv"

    @property
    def requests(self) -> list[str]:
        """Paths requested so far, in order."""
        return self.app["requests"]

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)
        time.sleep(0.05)

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        if self._loop and self._runner:
            future = asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop)
            future.result(timeout=2.0)

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def lineup_server() -> Generator:
    """Factory fixture: start a mock lineup site serving the given pages."""
    servers: list[AioHttpTestServer] = []

    def start(pages: dict[str, list[Union[str, bytes]]]) -> AioHttpTestServer:
        server = AioHttpTestServer(create_lineup_app(pages), find_free_port())
        server.start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()


@pytest.fixture
def episode_html() -> str:
    """A well-formed episode page."""
    return make_episode_html()
