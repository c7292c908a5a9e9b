"""Two tasks exchanging pings and pongs over a link."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from dataclasses import dataclass

from .errors import CommsError
from .link import EndpointDef, define_crosslink
from .router import Router


@dataclass(frozen=True)
class Ping:
    """A message sent by the pinger."""

    text: str


@dataclass(frozen=True)
class Pong:
    """A message sent by the ponger."""

    text: str


PING_PONG_LINK = define_crosslink(
    "PingPongLink",
    EndpointDef("PingerHandle", Ping, Pong),
    EndpointDef("PongerHandle", Pong, Ping),
    16,
)


async def run(rounds: int = 3, delay: float = 0.3) -> list[str]:
    """Play ``rounds`` ping-pong exchanges and return the lines printed."""
    lines: list[str] = []

    def emit(line: str, *, error: bool = False) -> None:
        lines.append(line)
        print(line, file=sys.stderr if error else sys.stdout)

    router = Router()
    PING_PONG_LINK.setup(router)
    markers = PING_PONG_LINK.markers

    async def pinger() -> None:
        pongs = router.take_receiver(markers["PingerHandleRecv"], Pong)
        for i in range(rounds):
            message = Ping(f"ping from pinger ({i})")
            emit(f"[Pinger] Sending: {message!r}")
            try:
                await router.send(markers["PingerHandleSend"], message)
            except CommsError as exc:
                emit(f"[Pinger] Send error: {exc}", error=True)
                return
            reply = await pongs.recv()
            if reply is None:
                emit("[Pinger] Ponger disconnected.")
                return
            emit(f"[Pinger] Received: {reply!r}")
            await asyncio.sleep(delay)
        emit("[Pinger] Finished.")

    async def ponger() -> None:
        pings = router.take_receiver(markers["PongerHandleRecv"], Ping)
        async for message in pings:
            emit(f"[Ponger] Received: {message!r}")
            reply = Pong("ack")
            emit(f"[Ponger] Sending reply: {reply!r}")
            try:
                await router.send(markers["PongerHandleSend"], reply)
            except CommsError as exc:
                emit(f"[Ponger] Send error: {exc}", error=True)
                return
        emit("[Ponger] Pinger disconnected.")

    ponger_task = asyncio.create_task(ponger())
    pinger_task = asyncio.create_task(pinger())
    try:
        await pinger_task
    finally:
        ponger_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ponger_task
    return lines


def main(argv: list[str] | None = None) -> int:
    """Run the ping-pong exchange from the command line."""
    parser = argparse.ArgumentParser(description="Exchange pings and pongs over a link.")
    parser.add_argument("--rounds", type=int, default=3, help="number of pings to send")
    parser.add_argument(
        "--delay", type=float, default=0.3, help="seconds to wait between pings"
    )
    args = parser.parse_args(argv)
    asyncio.run(run(args.rounds, args.delay))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())