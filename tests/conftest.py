"""Shared fixtures: an in-process stand-in for the amplifier control API."""

from __future__ import annotations

from typing import Any, Optional

import pytest_asyncio
from aiohttp import web

API_PATH = "/api/v1/nad"


class FakeAmplifierServer:
    """aiohttp application that behaves like the amplifier's HTTP bridge."""

    def __init__(self) -> None:
        self.state: dict[str, str] = {
            "Power": "On",
            "Mute": "Off",
            "Source": "CD",
            "SpeakerA": "On",
            "Volume": "-40",
            "Model": "C356",
        }
        self.received: list[dict[str, Any]] = []
        self.reads: list[str] = []
        self.port: Optional[int] = None
        self._failures: list[tuple[int, Any]] = []

    def fail_next(self, status: int, body: Any = None) -> None:
        """Answer the next request with ``status`` and ``body``."""
        self._failures.append((status, body))

    def make_url(self, path: str = "/") -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"http://127.0.0.1:{self.port}{path}"

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get(API_PATH + "/state/{variable}", self._state_handler)
        app.router.add_post(API_PATH, self._command_handler)
        return app

    def _failure(self) -> Optional[web.Response]:
        if not self._failures:
            return None
        status, body = self._failures.pop(0)
        if isinstance(body, bytes):
            return web.Response(status=status, body=body, content_type="application/json")
        if body is None or isinstance(body, dict):
            return web.json_response(
                body or {"status": status, "message": "Amplifier failure"},
                status=status,
            )
        return web.Response(status=status, text=str(body))

    async def _state_handler(self, request: web.Request) -> web.Response:
        variable = request.match_info["variable"]
        self.reads.append(variable)
        failure = self._failure()
        if failure is not None:
            return failure
        if variable not in self.state:
            return web.json_response(
                {"status": 400, "message": f"Invalid command: {variable}?"},
                status=400,
            )
        return web.json_response({"Variable": variable, "Value": self.state[variable]})

    async def _command_handler(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.received.append(body)
        failure = self._failure()
        if failure is not None:
            return failure

        variable = body["Variable"]
        operator = body["Operator"]
        if variable not in self.state:
            return web.json_response(
                {"status": 400, "message": f"Invalid command: {variable}{operator}"},
                status=400,
            )

        if operator == "=":
            self.state[variable] = body["Value"]
        elif operator in {"+", "-"}:
            step = 1 if operator == "+" else -1
            self.state[variable] = str(int(self.state[variable]) + step)

        return web.json_response({"Variable": variable, "Value": self.state[variable]})


@pytest_asyncio.fixture
async def amplifier_server(unused_tcp_port_factory):
    server = FakeAmplifierServer()

    runner = web.AppRunner(server.build_app())
    await runner.setup()

    server.port = unused_tcp_port_factory()
    site = web.TCPSite(runner, "127.0.0.1", server.port)
    await site.start()

    try:
        yield server
    finally:
        await runner.cleanup()
