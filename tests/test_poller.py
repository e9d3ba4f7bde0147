"""Long-poll loop: filtering, fan-out, failure handling, shutdown."""

import asyncio

import httpx
import pytest

from janus_http import AsyncJanus, JanusOperation

from conftest import BASE_URL, HANDLE_ID, SESSION_ID, eventually, plugin_event


class TestLongPoll:

    @pytest.mark.asyncio
    async def test_keepalive_is_filtered(self, client, gateway):
        gateway.events += [
            {"janus": "keepalive", "session_id": SESSION_ID},
            plugin_event(HANDLE_ID, {"videoroom": "event", "n": 1}),
            {"janus": "keepalive", "session_id": SESSION_ID},
        ]
        received = []
        session = await client.create_session()
        session.add_event_handler(received.append)
        await eventually(lambda: not gateway.events)
        await eventually(lambda: len(received) == 1)
        await asyncio.sleep(0.03)
        assert [e.op for e in received] == [JanusOperation.EVENT]

    @pytest.mark.asyncio
    async def test_fan_out_to_every_subscriber_in_order(self, client, gateway):
        session = await client.create_session()
        inboxes = [[], [], []]
        for inbox in inboxes:
            session.add_event_handler(inbox.append)
        gateway.events += [plugin_event(HANDLE_ID, {"n": n}) for n in range(3)]
        gateway.events.append(plugin_event(HANDLE_ID + 1, {"n": 3}))
        await eventually(lambda: all(len(inbox) == 4 for inbox in inboxes))
        await asyncio.sleep(0.03)
        for inbox in inboxes:
            assert [e.plugin_payload["n"] for e in inbox] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_body_delivers_nothing_and_polls_again(self, client, gateway):
        received = []
        session = await client.create_session()
        session.add_event_handler(received.append)
        await eventually(lambda: gateway.polls() >= 3)
        assert received == []
        assert session.polling

    @pytest.mark.asyncio
    async def test_poll_interval_bounds_request_rate(self, gateway):
        janus = AsyncJanus(base_url=BASE_URL, poll_interval=0.2, transport=httpx.MockTransport(gateway))
        try:
            await janus.create_session()
            await asyncio.sleep(0.3)
            assert 1 <= gateway.polls() <= 2
        finally:
            await janus.close()

    @pytest.mark.asyncio
    async def test_transport_and_decode_errors_do_not_stop_the_loop(self, client, gateway):
        gateway.events += [
            httpx.ConnectError("refused"),
            httpx.Response(500, text="boom"),
            b"{not json",
            {"no": "janus field"},
            plugin_event(HANDLE_ID, {"videoroom": "event"}),
        ]
        received = []
        session = await client.create_session()
        session.add_event_handler(received.append)
        await eventually(lambda: len(received) == 1)
        assert session.polling

    @pytest.mark.asyncio
    async def test_error_events_reach_subscribers(self, client, gateway):
        gateway.events.append({"janus": "error", "session_id": SESSION_ID,
                               "error": {"code": 458, "reason": "No such session"}})
        received = []
        session = await client.create_session()
        session.add_event_handler(received.append)
        await eventually(lambda: len(received) == 1)
        assert received[0].op is JanusOperation.ERROR
        assert received[0].error.code == 458

    @pytest.mark.asyncio
    async def test_batched_events(self, gateway):
        janus = AsyncJanus(base_url=BASE_URL, poll_interval=0.01, max_events=5,
                           transport=httpx.MockTransport(gateway))
        gateway.events.append([
            {"janus": "keepalive"},
            plugin_event(HANDLE_ID, {"n": 1}),
            plugin_event(HANDLE_ID, {"n": 2}),
        ])
        received = []
        try:
            session = await janus.create_session()
            session.add_event_handler(received.append)
            await eventually(lambda: len(received) == 2)
            assert [e.plugin_payload["n"] for e in received] == [1, 2]
        finally:
            await janus.close()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self, client, gateway):
        session = await client.create_session()
        received = []

        def broken(_event):
            raise RuntimeError("subscriber bug")

        session.add_event_handler(broken)
        session.add_event_handler(received.append)
        gateway.events.append(plugin_event(HANDLE_ID, {}))
        await eventually(lambda: len(received) == 1)
        assert session.polling

    @pytest.mark.asyncio
    async def test_async_handlers_run_as_tasks(self, client, gateway):
        session = await client.create_session()
        release = asyncio.Event()
        slow_seen, fast_seen = [], []

        async def slow(event):
            await release.wait()
            slow_seen.append(event)

        session.add_event_handler(slow)
        session.add_event_handler(fast_seen.append)
        gateway.events += [plugin_event(HANDLE_ID, {"n": 1}), plugin_event(HANDLE_ID, {"n": 2})]
        await eventually(lambda: len(fast_seen) == 2)
        assert slow_seen == []
        release.set()
        await eventually(lambda: len(slow_seen) == 2)

    @pytest.mark.asyncio
    async def test_async_handler_can_destroy_its_own_session(self, client, gateway):
        session = await client.create_session()
        await client.attach(session.id, "videoroom")
        after = []

        async def hangup(event):
            await client.destroy_session(session.id)
            after.append("continued")

        session.add_event_handler(hangup)
        gateway.events.append(plugin_event(HANDLE_ID, {"videoroom": "event", "leaving": "ok"}))
        await eventually(lambda: after == ["continued"])
        assert session.closed
        assert not session.polling
        assert session.handles == {}
        assert len(gateway.posts("destroy")) == 1

    @pytest.mark.asyncio
    async def test_removed_handler_stops_receiving(self, client, gateway):
        session = await client.create_session()
        received = []
        remove = session.add_event_handler(received.append)
        gateway.events.append(plugin_event(HANDLE_ID, {"n": 1}))
        await eventually(lambda: len(received) == 1)
        remove()
        gateway.events.append(plugin_event(HANDLE_ID, {"n": 2}))
        await eventually(lambda: not gateway.events)
        await asyncio.sleep(0.03)
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_events_stream_filters_by_handle_and_ends_on_destroy(self, client, gateway):
        session = await client.create_session()
        seen = []

        async def consume():
            async for event in session.events(handle_id=HANDLE_ID):
                seen.append(event.plugin_payload["n"])

        consumer = asyncio.ensure_future(consume())
        await asyncio.sleep(0)
        gateway.events += [
            plugin_event(HANDLE_ID, {"n": 1}),
            plugin_event(HANDLE_ID + 1, {"n": 2}),
            plugin_event(HANDLE_ID, {"n": 3}),
        ]
        await eventually(lambda: seen == [1, 3])
        await client.destroy_session(session.id)
        await asyncio.wait_for(consumer, timeout=2)

    @pytest.mark.asyncio
    async def test_cancel_during_inflight_poll_is_clean(self, gateway, caplog):
        hold = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                await hold.wait()
            return gateway(request)

        janus = AsyncJanus(base_url=BASE_URL, poll_interval=0.01, transport=httpx.MockTransport(handler))
        session = await janus.create_session()
        await asyncio.sleep(0.02)
        with caplog.at_level("WARNING"):
            await janus.destroy_session(session.id)
        assert not session.polling
        assert [r for r in caplog.records if r.levelname in ("WARNING", "ERROR")] == []
        await janus.close()
