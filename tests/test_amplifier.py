"""Tests for the amplifier HTTP adapter."""

import aiohttp
import pytest

from nad_remote.adapters import AmplifierClient, AmplifierRequestError
from nad_remote.config import AmplifierConfig


def _client(server) -> AmplifierClient:
    return AmplifierClient(AmplifierConfig(url=server.make_url("/")))


@pytest.mark.asyncio
async def test_fetch_state_reads_variable(amplifier_server):
    async with _client(amplifier_server) as client:
        result = await client.fetch_state("Source")

    assert result == {"Variable": "Source", "Value": "CD"}
    assert amplifier_server.reads == ["Source"]


@pytest.mark.asyncio
async def test_send_command_posts_payload(amplifier_server):
    async with _client(amplifier_server) as client:
        result = await client.send_command(
            {"Variable": "Mute", "Operator": "=", "Value": "On"}
        )

    assert result == {"Variable": "Mute", "Value": "On"}
    assert amplifier_server.received == [
        {"Variable": "Mute", "Operator": "=", "Value": "On"}
    ]


@pytest.mark.asyncio
async def test_error_message_taken_from_json_body(amplifier_server):
    amplifier_server.fail_next(
        500, {"status": 500, "message": "Could not send command to amplifier"}
    )

    async with _client(amplifier_server) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.send_command({"Variable": "Power", "Operator": "=", "Value": "On"})

    assert excinfo.value.status == 500
    assert excinfo.value.message == "Could not send command to amplifier"


@pytest.mark.asyncio
async def test_error_message_falls_back_to_text(amplifier_server):
    amplifier_server.fail_next(502, "Bad Gateway from proxy")

    async with _client(amplifier_server) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.fetch_state("Power")

    assert excinfo.value.status == 502
    assert excinfo.value.message == "Bad Gateway from proxy"


@pytest.mark.asyncio
async def test_unknown_variable_surfaces_bad_request(amplifier_server):
    async with _client(amplifier_server) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.fetch_state("Tape1")

    assert excinfo.value.status == 400
    assert excinfo.value.message == "Invalid command: Tape1?"


@pytest.mark.asyncio
async def test_malformed_reply_is_request_error(amplifier_server):
    amplifier_server.fail_next(200, "not json")

    async with _client(amplifier_server) as client:
        with pytest.raises(AmplifierRequestError, match="Malformed reply"):
            await client.fetch_state("Power")


@pytest.mark.asyncio
async def test_connection_failure_has_status_zero(unused_tcp_port):
    config = AmplifierConfig(url=f"http://127.0.0.1:{unused_tcp_port}")

    async with AmplifierClient(config) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.fetch_state("Power")

    assert excinfo.value.status == 0
    assert excinfo.value.message


@pytest.mark.asyncio
async def test_custom_api_path(amplifier_server):
    config = AmplifierConfig(url=amplifier_server.make_url("/"), api_path="/nope")

    async with AmplifierClient(config) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.fetch_state("Power")

    assert excinfo.value.status == 404


@pytest.mark.asyncio
async def test_injected_session_is_not_closed(amplifier_server):
    async with aiohttp.ClientSession() as http_session:
        client = AmplifierClient(
            AmplifierConfig(url=amplifier_server.make_url("/")), session=http_session
        )
        await client.fetch_state("Power")
        await client.aclose()

        assert not http_session.closed


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [200, 500])
async def test_undecodable_body_is_request_error(amplifier_server, status):
    amplifier_server.fail_next(status, b"\xff\xfe garbage")

    async with _client(amplifier_server) as client:
        with pytest.raises(AmplifierRequestError) as excinfo:
            await client.fetch_state("Power")

    assert excinfo.value.status == status
