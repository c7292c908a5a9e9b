# crosslink

Typed, asynchronous message links between the parts of an `asyncio`
program.

A *link* joins two endpoints. Each endpoint sends one message type and
receives the other: what one side sends, the other side receives. A link
is made of a pair of bounded channels whose ends are registered with a
single `Router`. Components talk through the router by naming the pathway
(marker) they use, and the router checks each message against the type
that pathway was set up for.

## Installing

```
pip install .
```

The package has no dependencies outside the standard library.

## Modules

### `crosslink.channel`

- `channel(buffer_size)` returns a `(Sender, Receiver)` pair that buffers
  at most `buffer_size` messages. A size below 1 raises `ValueError`, a
  non-integer raises `TypeError`.
- `Sender.send(message)` (a coroutine) waits while the buffer is full and
  raises `SendFailed` if the sender or the receiving side has been closed.
  `Sender.clone()` gives another sender for the same receiver;
  `Sender.close()` releases one. Senders are also context managers that
  close on exit.
- `Receiver.recv()` (a coroutine) returns the next message, or `None` once
  every sender is closed (or the receiver itself is closed) and the buffer
  is drained. A receiver can be read with `async for`.
  `Receiver.close()` stops new messages; messages already buffered can
  still be read.

### `crosslink.router`

- `Router.register_sender(marker, message_type, sender)` and
  `Router.register_receiver(marker, message_type, receiver)` record channel
  ends under a hashable marker. Registering the same marker twice raises
  `PathwayAlreadyRegistered`.
- `Router.send(marker, message)` (a coroutine) delivers a message. An
  unknown marker raises `PathwayNotFound`; a message that is not an
  instance of the registered type raises `InternalInconsistency`; a closed
  channel raises `SendFailed`.
- `Router.take_receiver(marker, message_type)` hands out a receiver once.
  An unknown marker raises `PathwayNotFound`, the wrong message type raises
  `TypeMismatch`, and a second take raises `InternalInconsistency`.

### `crosslink.link`

- `EndpointDef(handle_name, sends, receives)` describes one end of a link.
  The handle name must be a Python identifier.
- `define_crosslink(link_id, first, second, buffer_size)` returns a
  `LinkDefinition`. What `first` sends must be what `second` receives and
  the other way round, otherwise `TypeMismatch` is raised. The two handle
  names must differ and the buffer size must be a non-negative integer
  (`ValueError` otherwise).
- `LinkDefinition.name` is the link id in snake case, `setup_name` is
  `setup_<name>`, and `markers` maps `<Handle>Send` and `<Handle>Recv` for
  each endpoint to the marker used on the router.
- `LinkDefinition.setup(router, buffer_size_override=None)` creates both
  channels, registers all four ends and returns the two endpoints.
- `parse_link_spec(text, types)` builds the same definition from text;
  message type names are looked up in the `types` mapping. Malformed text
  raises `ValueError`.

### `crosslink.errors`

Every error is a subclass of `CommsError`: `SendFailed`, `RecvFailed`,
`TypeMismatch`, `PathwayAlreadyRegistered`, `PathwayNotFound`,
`LinkNotFound`, `MessageTypeNotMappedForLink` and `InternalInconsistency`.
`str()` of an error gives its kind followed by the detail, for example
`Pathway not found: ...`. `RecvFailed`, `LinkNotFound` and
`MessageTypeNotMappedForLink` are defined for callers' use; the package
itself does not raise them.

## Example

```python
import asyncio
from dataclasses import dataclass

from crosslink.link import EndpointDef, define_crosslink
from crosslink.router import Router


@dataclass
class Request:
    text: str


@dataclass
class Reply:
    text: str


LINK = define_crosslink(
    "ClientServer",
    EndpointDef("Client", Request, Reply),
    EndpointDef("Server", Reply, Request),
    8,
)


async def main() -> None:
    router = Router()
    LINK.setup(router)
    markers = LINK.markers

    requests = router.take_receiver(markers["ServerRecv"], Request)
    replies = router.take_receiver(markers["ClientRecv"], Reply)

    await router.send(markers["ClientSend"], Request("hello"))
    request = await requests.recv()
    await router.send(markers["ServerSend"], Reply(request.text.upper()))
    print(await replies.recv())  # Reply(text='HELLO')


asyncio.run(main())
```

The same link written as text:

```python
from crosslink.link import parse_link_spec

LINK = parse_link_spec(
    'link_id: "ClientServer", '
    "Client { sends: Request, receives: Reply }, "
    "Server { sends: Reply, receives: Request }, "
    "buffer_size: 8,",
    {"Request": Request, "Reply": Reply},
)
```

## Ping-pong demo

`crosslink.ping_pong` runs two tasks over a link: the pinger sends `Ping`
messages and waits for a `Pong` reply to each, and the ponger answers
every ping with `Pong("ack")`. Both print what they send and receive.

```
crosslink-ping-pong --rounds 3 --delay 0.3
```

`--rounds` sets the number of pings (default 3) and `--delay` the seconds
to wait between them (default 0.3). From code, `await run(rounds, delay)`
plays the exchange and returns the printed lines.

## Limits

Channels are built on `asyncio` and work only between tasks of one event
loop. There is no transport between threads, processes or machines, and
nothing is stored.

## Running the tests

```
pip install ".[test]"
pytest
```