import asyncio
import logging
import sys

from parley.bootstrap.config.loader import get_cli_args
from parley.bootstrap.config.settings import ParleyConfig
from parley.bootstrap.deps import build_connector, get_config
from parley.core.errors import ConnectError, SendError
from parley.core.helpers.utils import setup_logging
from parley.core.ports.console import InputSource, OutputSink
from parley.core.session import SessionCoordinator
from parley.infra.console import ConsoleInput, ConsoleSink


async def run_session(
    config: ParleyConfig,
    source: InputSource,
    sink: OutputSink,
) -> int:
    """Run one session and translate its outcome into an exit status."""
    logger = logging.getLogger("bootstrap.boot")

    try:
        endpoint = config.get_endpoint()
        connector = build_connector(endpoint, config.get_connection_config())
        session = SessionCoordinator(connector, endpoint, source, sink)
        outcome = await session.run()
    except (ConnectError, SendError) as ex:
        print(f"Connection failed: {ex}", file=sys.stderr)
        return 1

    logger.info(
        f"Sent {outcome.sent}, received {outcome.received}, "
        f"discarded {outcome.discarded}"
    )
    print("Connection closed.", file=sys.stderr)
    return 0


def cancel_session(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> None:
    """
    Unwind an interrupted session: the session task goes first so it
    drains and closes its connection, then whatever is still pending.
    """
    if not task.done():
        task.cancel()
        loop.run_until_complete(asyncio.gather(task, return_exceptions=True))

    leftovers = asyncio.all_tasks(loop)
    for leftover in leftovers:
        leftover.cancel()
    if leftovers:
        loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))


def main():
    cli = get_cli_args()
    setup_logging(cli.log_level)
    config = get_config()

    source = ConsoleInput()
    sink = ConsoleSink()
    loop = asyncio.new_event_loop()
    task = loop.create_task(run_session(config, source, sink))

    status = 130
    try:
        status = loop.run_until_complete(task)
    except KeyboardInterrupt:
        cancel_session(loop, task)
    finally:
        source.close()
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.run_until_complete(loop.shutdown_default_executor())
        finally:
            loop.close()

    sys.exit(status)


if __name__ == "__main__":
    main()
