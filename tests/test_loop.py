import asyncio
import json

import pytest

from ethlibs.jsonrpc.id import ID, int_id, string_id
from ethlibs.jsonrpc.params import must_params
from ethlibs.jsonrpc.request import Request, must_request
from ethlibs.node.loop import LoopingTransport, copy_request


class FakeBackend:
    def __init__(self, responder=None, fail_writes=False):
        self.incoming = asyncio.Queue()
        self.written = []
        self.closed = False
        self.responder = responder
        self.fail_writes = fail_writes

    async def read(self):
        item = await self.incoming.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def write(self, payload):
        if self.fail_writes:
            raise OSError("broken pipe")
        message = json.loads(payload)
        self.written.append(message)
        if self.responder is not None:
            for reply in self.responder(message):
                self.push(reply)

    def push(self, obj):
        self.incoming.put_nowait(json.dumps(obj).encode())

    async def close(self):
        self.closed = True


def standard_responder(message):
    if message["method"] == "eth_subscribe":
        yield {"jsonrpc": "2.0", "id": message["id"], "result": "0xsub"}
        yield {
            "jsonrpc": "2.0",
            "method": "parity_subscription",
            "params": {"subscription": "0xsub", "result": {"n": 0}},
        }
        yield {
            "jsonrpc": "2.0",
            "method": "eth_subscription",
            "params": {"subscription": "0xsub", "result": {"n": 1}},
        }
    elif message["method"] == "eth_unsubscribe":
        yield {"jsonrpc": "2.0", "id": message["id"], "result": True}
    else:
        yield {"jsonrpc": "2.0", "id": message["id"], "result": "0x10"}


def error_responder(message):
    return [{"jsonrpc": "2.0", "id": message["id"], "error": {"code": -32000}}]


def numeric_id_responder(message):
    return [{"jsonrpc": "2.0", "id": message["id"], "result": 5}]


def subscribe_then_ack_responder(message):
    if message["method"] == "eth_subscribe":
        return [{"jsonrpc": "2.0", "id": message["id"], "result": "0xsub"}]
    return [{"jsonrpc": "2.0", "id": message["id"], "result": True}]


def subscribe_only_responder(message):
    return [{"jsonrpc": "2.0", "id": message["id"], "result": "0xsub"}]


def make_transport(backend, **kwargs):
    return LoopingTransport(backend.read, backend.write, backend.close, **kwargs)


async def collect(sub, limit=None):
    out = []
    async for n in sub:
        out.append(n)
        if limit is not None and len(out) >= limit:
            break
    return out


async def wait_for_writes(backend, count):
    for _ in range(1000):
        if len(backend.written) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError("request was never written")


def test_next_id_numeric():
    transport = LoopingTransport(None, None, counter=5)
    assert transport.next_id(int_id(1)) == ID(num=6)


def test_next_id_string_seed():
    transport = LoopingTransport(None, None, counter=0)
    assert transport.next_id(string_id("newHeads")) == string_id("newHeads-1")


def test_next_id_wraps_around():
    transport = LoopingTransport(None, None, counter=(1 << 64) - 1)
    assert transport.next_id(int_id(1)) == ID(num=0)


def test_next_ids_are_unique():
    transport = LoopingTransport(None, None)
    ids = {transport.next_id(int_id(1)) for _ in range(50)}
    assert len(ids) == 50


def test_is_bidirectional():
    assert LoopingTransport(None, None).is_bidirectional() is True


def test_copy_request_is_equal_but_independent():
    original = must_request(7, "eth_getBlockByNumber", "latest", True)
    copied = copy_request(original)
    assert copied == original
    assert copied is not original
    copied.params.append("1")
    assert len(original.params) == 2


def test_copy_request_without_method_fails():
    with pytest.raises(ValueError, match="could not copy request"):
        copy_request(Request(id=int_id(1)))


@pytest.mark.asyncio
async def test_request_restores_caller_id():
    backend = FakeBackend(standard_responder)
    async with make_transport(backend) as transport:
        response = await asyncio.wait_for(
            transport.request(must_request(1, "eth_blockNumber")), 2
        )
    assert response.id == int_id(1)
    assert response.result == '"0x10"'
    assert backend.written[0]["method"] == "eth_blockNumber"
    assert backend.written[0]["id"] != 1
    assert backend.closed is True


@pytest.mark.asyncio
async def test_concurrent_requests_get_their_own_responses():
    backend = FakeBackend(standard_responder)
    async with make_transport(backend) as transport:
        responses = await asyncio.wait_for(
            asyncio.gather(
                *(transport.request(must_request(i, "eth_chainId")) for i in range(5))
            ),
            2,
        )
    assert [r.id for r in responses] == [int_id(i) for i in range(5)]


@pytest.mark.asyncio
async def test_subscribe_delivers_notifications():
    backend = FakeBackend(standard_responder)
    async with make_transport(backend) as transport:
        request = Request(
            jsonrpc="2.0",
            id=string_id("newHeads"),
            method="eth_subscribe",
            params=must_params("newHeads"),
        )
        sub = await asyncio.wait_for(transport.subscribe(request), 2)
        assert sub.id == "0xsub"
        assert sub.response.id == string_id("newHeads")
        assert backend.written[0]["id"].startswith("newHeads-")
        received = await asyncio.wait_for(collect(sub, limit=1), 2)
    assert received[0].method == "eth_subscription"
    assert json.loads(received[0].params)["result"] == {"n": 1}


@pytest.mark.asyncio
async def test_subscribe_rejects_other_methods():
    transport = LoopingTransport(None, None)
    with pytest.raises(ValueError, match="not a subscription request"):
        await transport.subscribe(must_request(1, "eth_blockNumber"))


@pytest.mark.asyncio
async def test_subscribe_error_response():
    backend = FakeBackend(error_responder)
    async with make_transport(backend) as transport:
        with pytest.raises(RuntimeError, match="Error w/ subscription"):
            await asyncio.wait_for(
                transport.subscribe(must_request(1, "eth_subscribe", "newHeads")), 2
            )


@pytest.mark.asyncio
async def test_subscribe_non_string_id():
    backend = FakeBackend(numeric_id_responder)
    async with make_transport(backend) as transport:
        with pytest.raises(RuntimeError, match="Non-string subscription id"):
            await asyncio.wait_for(
                transport.subscribe(must_request(1, "eth_subscribe", "newHeads")), 2
            )


@pytest.mark.asyncio
async def test_unsubscribe_ends_iteration():
    backend = FakeBackend(subscribe_then_ack_responder)
    async with make_transport(backend) as transport:
        sub = await asyncio.wait_for(
            transport.subscribe(must_request(1, "eth_subscribe", "newHeads")), 2
        )
        await asyncio.wait_for(sub.unsubscribe(), 2)
        assert "0xsub" not in transport.subscriptions
        assert await asyncio.wait_for(collect(sub), 2) == []
    assert backend.written[1]["method"] == "eth_unsubscribe"
    assert backend.written[1]["params"] == ["0xsub"]


@pytest.mark.asyncio
async def test_read_error_fails_pending_request():
    backend = FakeBackend()
    transport = make_transport(backend).start()
    pending = asyncio.ensure_future(transport.request(must_request(1, "eth_blockNumber")))
    await wait_for_writes(backend, 1)
    backend.incoming.put_nowait(EOFError("connection closed"))
    with pytest.raises(ConnectionError, match="transport context finished"):
        await asyncio.wait_for(pending, 2)
    await transport.close()
    assert transport.closed is True
    assert isinstance(transport.error, EOFError)
    assert backend.closed is True


@pytest.mark.asyncio
async def test_read_error_stops_subscriptions():
    backend = FakeBackend(subscribe_only_responder)
    transport = make_transport(backend).start()
    sub = await asyncio.wait_for(
        transport.subscribe(must_request(1, "eth_subscribe", "newHeads")), 2
    )
    backend.incoming.put_nowait(EOFError("gone"))
    assert await asyncio.wait_for(collect(sub), 2) == []
    assert sub.stopped is True
    await transport.close()


@pytest.mark.asyncio
async def test_unparsable_message_stops_transport():
    backend = FakeBackend()
    transport = make_transport(backend).start()
    backend.incoming.put_nowait(b"not json")
    for _ in range(1000):
        if transport.closed:
            break
        await asyncio.sleep(0)
    assert transport.closed is True
    assert "unrecognized message" in str(transport.error)


@pytest.mark.asyncio
async def test_write_failure_closes_transport():
    backend = FakeBackend(fail_writes=True)
    transport = make_transport(backend)
    with pytest.raises(ConnectionError, match="error writing"):
        await transport.request(must_request(1, "eth_blockNumber"))
    await transport.close()
    with pytest.raises(ConnectionError, match="transport context finished"):
        await transport.request(must_request(2, "eth_blockNumber"))


@pytest.mark.asyncio
async def test_request_after_close_fails():
    backend = FakeBackend(standard_responder)
    transport = make_transport(backend).start()
    await transport.close()
    assert backend.closed is True
    with pytest.raises(ConnectionError):
        await transport.request(must_request(1, "eth_blockNumber"))


@pytest.mark.asyncio
async def test_abandoned_request_does_not_break_transport():
    backend = FakeBackend()
    async with make_transport(backend) as transport:
        pending = asyncio.ensure_future(
            transport.request(must_request(1, "eth_blockNumber"))
        )
        await wait_for_writes(backend, 1)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending
        backend.push({"jsonrpc": "2.0", "id": backend.written[0]["id"], "result": "0x1"})

        backend.responder = standard_responder
        response = await asyncio.wait_for(
            transport.request(must_request(2, "eth_gasPrice")), 2
        )
    assert response.id == int_id(2)
    assert response.result == '"0x10"'