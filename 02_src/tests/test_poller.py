"""Tests for VectorProfilePoller."""

import asyncio
import logging

import httpx
import pytest

from tracedash.poller import VectorProfilePoller, server_origin


class TestServerOrigin:
    """Tests for server_origin()."""

    def test_strips_path(self):
        """Test that only scheme, host and port remain."""
        assert server_origin("http://localhost:9000/debug/index.html") == "http://localhost:9000/"


class TestPollOnce:
    """Tests for VectorProfilePoller.poll_once()."""

    @pytest.mark.asyncio
    async def test_updates_every_owner(self, http_client, vector_profile, stats_requests):
        """Test that each owner in the snapshot gets a histogram."""
        poller = VectorProfilePoller("http://debug.test/", vector_profile, client=http_client)

        await poller.poll_once()

        assert [block.owner for block in vector_profile.blocks] == ["libA", "libB"]
        assert [row.label for row in vector_profile.get("libA").rows] == ["10.0%", "20.0%", "70.0%"]
        assert stats_requests[0].method == "GET"
        assert stats_requests[0].url.path == "/vector-profiler-stats"
        assert poller.polls == 1

    @pytest.mark.asyncio
    async def test_http_error_raises(self, vector_profile):
        """Test that a failing endpoint surfaces as an HTTP error."""
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
            base_url="http://debug.test",
        )
        poller = VectorProfilePoller("http://debug.test/", vector_profile, client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await poller.poll_once()

        assert vector_profile.blocks == []

    @pytest.mark.asyncio
    async def test_malformed_owner_is_skipped(self, vector_profile, caplog):
        """Test that one bad owner entry does not keep the others from updating."""
        payload = {"maxSizeHistogramByOwner": {"bad": None, "good": [1, 2], "worse": [1, "x"]}}
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
            base_url="http://debug.test",
        )
        poller = VectorProfilePoller("http://debug.test/", vector_profile, client=client)

        with caplog.at_level(logging.WARNING):
            await poller.poll_once()

        assert [block.owner for block in vector_profile.blocks] == ["good"]
        assert [row.count for row in vector_profile.get("good").rows] == [1, 2]
        assert poller.polls == 1
        skipped = [r for r in caplog.records if r.getMessage().startswith("Skipping histogram")]
        assert [r.owner for r in skipped] == ["bad", "worse"]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_url_is_a_poll_failure(self, vector_profile, caplog):
        """Test that a malformed debug server URL is logged by the loop, not raised."""
        poller = VectorProfilePoller("http://localhost:notaport/", vector_profile, interval=0.01)

        with caplog.at_level(logging.ERROR):
            await poller.start()
            await asyncio.sleep(0.05)
            await poller.stop()

        assert poller.failures >= 1
        assert poller.polls == 0
        assert "Vector profile poll failed" in caplog.text


class TestPollingLoop:
    """Tests for the background loop."""

    @pytest.mark.asyncio
    async def test_start_polls_repeatedly(self, http_client, vector_profile, stats_requests):
        """Test that the loop keeps polling on its interval."""
        poller = VectorProfilePoller(
            "http://debug.test/", vector_profile, interval=0.01, client=http_client
        )

        await poller.start()
        await asyncio.sleep(0.1)
        await poller.stop()

        assert len(stats_requests) >= 2
        assert not poller.running

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_loop(self, vector_profile, caplog):
        """Test that a bad response is logged and polling continues."""
        responses = [httpx.Response(200, text="not json"), httpx.Response(200, json={"nope": 1})]

        def handler(request):
            if responses:
                return responses.pop(0)
            return httpx.Response(200, json={"maxSizeHistogramByOwner": {"late": [1]}})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://debug.test")
        poller = VectorProfilePoller("http://debug.test/", vector_profile, interval=0.01, client=client)

        with caplog.at_level(logging.ERROR):
            await poller.start()
            await asyncio.sleep(0.15)
            await poller.stop()

        assert poller.failures == 2
        assert vector_profile.get("late") is not None
        assert "Vector profile poll failed" in caplog.text

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, http_client, vector_profile):
        """Test that a second start() does not spawn a second loop."""
        poller = VectorProfilePoller("http://debug.test/", vector_profile, interval=10, client=http_client)

        await poller.start()
        task = poller._task
        await poller.start()

        assert poller._task is task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_stop_keeps_injected_client_open(self, http_client, vector_profile):
        """Test that a client passed in is left for its owner to close."""
        poller = VectorProfilePoller("http://debug.test/", vector_profile, client=http_client)

        await poller.start()
        await poller.stop()

        assert not http_client.is_closed
        await http_client.aclose()
