# ethlibs

Helpers for talking to Ethereum nodes from Python:

- `ethlibs.jsonrpc`: JSON-RPC 2.0 requests, responses, notifications, IDs,
  params and errors, plus a small WSGI application for serving requests.
- `ethlibs.rlp`: Recursive Length Prefix values, encoding, decoding and
  Keccak-256 hashing.
- `ethlibs.node`: an asyncio client for Ethereum nodes over HTTP, WebSocket
  or an IPC socket, with `eth_subscribe` support on WebSocket and IPC.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## JSON-RPC

```python
from ethlibs.jsonrpc.request import must_request, parse_request

request = must_request(1, "eth_getBlockByNumber", "latest", True)
print(request.dumps())
# {"method":"eth_getBlockByNumber","params":["latest",true],"id":1,"jsonrpc":"2.0"}

parsed = parse_request('{"method":"eth_blockNumber","id":42,"params":[]}')
print(parsed.method, parsed.id)  # eth_blockNumber 42
```

- `ethlibs.jsonrpc.id`: `ID`, `string_id`, `int_id` and `parse_id`. An ID
  is either a string or an unsigned 64-bit integer.
- `ethlibs.jsonrpc.params`: `Params` is a list holding the compact JSON text
  of each parameter; `make_params(*args)` builds one (or `None` when given
  no arguments), `Params.decode(count)` and `Params.decode_single(pos)` turn
  parameters back into Python values and raise `ValueError` when there are
  too few.
- `ethlibs.jsonrpc.request`: `Request`, `RequestWithNetwork`, `new_request`,
  `make_request`, `must_request`, `parse_request` (a method and an ID are
  required) and `parse_request_with_network`. A request with no params is
  written with `"params":[]`.
- `ethlibs.jsonrpc.notification`: `Notification` and `parse_notification`;
  `Notification.decode_params()` decodes the params JSON.
- `ethlibs.jsonrpc.response`: `Response` holds Python values,
  `RawResponse` keeps `result` and `error` as JSON text. A response with an
  error is written without a result; one without a result gets
  `"result":null`.
- `ethlibs.jsonrpc.messages.parse_message` reads any incoming message and
  returns a `Request` (method and ID), a `Notification` (method, no ID) or a
  `RawResponse` (no method).
- `ethlibs.jsonrpc.errors`: `ErrorCode` and `JSONRPCError`, an exception
  whose `to_json()` gives the error object. Helpers such as
  `invalid_params`, `method_not_found`, `method_not_supported` and
  `limit_exceeded` build errors with the standard codes.

### Serving JSON-RPC over HTTP

`request_handler(fn)` returns a `RequestHandler`, a WSGI application. The
function receives a `RequestContext` (the WSGI `environ` and the raw
request body as `raw_json`) and the decoded `Request`; it returns the
result, or raises `JSONRPCError` to answer with an error.

```python
from wsgiref.simple_server import make_server

from ethlibs.jsonrpc.errors import method_not_supported
from ethlibs.jsonrpc.handlers import request_handler

def handle(ctx, request):
    if request.method != "eth_blockNumber":
        raise method_not_supported(request)
    return "0x123456"

app = request_handler(handle)
make_server("localhost", 8545, app).serve_forever()
```

Requests whose `Content-Type` is not exactly `application/json` get a
415 reply. A body that cannot be decoded as a request gets a JSON-RPC
`invalid request` error with status 200 and no ID.

## RLP

```python
from ethlibs.rlp.decode import from_hex
from ethlibs.rlp.value import Value

encoded = Value(items=[Value("0x636174"), Value("0x646f67")]).encode()
# "0xc88363617483646f67"
value = from_hex(encoded)
print(value.is_list(), [item.string for item in value.items])
print(value.hash())  # 0x-prefixed Keccak-256 of the encoding
```

A `Value` is a string when `string` (a 0x-prefixed hex string) is
non-empty and otherwise the list in `items`. `encode()`, `hash()` and
`hash_bytes()` raise `ValueError` for strings that are not valid 0x hex;
`from_hex` raises `ValueError` for malformed or truncated input and for
trailing data.

## Talking to a node

```python
import asyncio

from ethlibs.node.client import new_client

async def main():
    client = await new_client("wss://node.example.com/ws")
    try:
        print(await client.block_number())
        if client.is_bidirectional():
            heads = await client.subscribe_new_heads()
            async for notification in heads:
                print(notification.decode_params())
                await heads.unsubscribe()
                break
    finally:
        await client.close()

asyncio.run(main())
```

`new_client(url)` picks the transport from the URL: `http://` and
`https://` use `HTTPTransport`, `ws://` and `wss://` use
`connect_websocket`, and anything else is taken as the path of an IPC
socket and opened with `connect_ipc`. `new_custom_client(requester,
subscriber)` wraps objects of your own that provide `request` and,
optionally, `subscribe`.

`Client` offers `request`, `subscribe`, `url`, `is_bidirectional`,
`block_number`, `net_version`, `chain_id`, `gas_price`,
`max_priority_fee_per_gas`, `send_raw_transaction`,
`subscribe_new_heads`, `subscribe_new_pending_transactions` and `close`.
A node error is raised as `RuntimeError` carrying the error's JSON text.

To set the JSON-RPC ID that client calls use, wrap them in
`ethlibs.node.context.request_id`:

```python
from ethlibs.jsonrpc.id import string_id
from ethlibs.node.context import request_id

with request_id(string_id("test")):
    number = await client.block_number()
```

WebSocket and IPC connections run through `LoopingTransport`, which gives
each outgoing request a fresh ID, matches responses back to their callers
with the caller's ID restored, and hands `eth_subscription` notifications
to the matching `Subscription`. Iterating over a subscription ends once it
has been stopped, either by an `eth_unsubscribe` sent over the transport or
by the transport closing.

## What this package does not do

- There are no typed models for blocks, transactions, receipts or logs,
  and the client has no helpers that return them (no block, transaction,
  receipt, log or gas-estimate lookups). Send such calls with
  `Client.request` and decode the `RawResponse` yourself.
- HTTP transports do not support subscriptions; `subscribe` raises
  `NotImplementedError`.
- There is no command-line program.