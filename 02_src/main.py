"""Main entry point for faultwatch."""

import asyncio
import os
import sys
import threading
from dotenv import load_dotenv

from faultwatch import Application
from faultwatch.config import PROJECT_ROOT, resolve_detection_mode
from faultwatch.logging_config import get_logger, setup_logging
from scenario import FireAndForgetScenario

logger = get_logger(__name__)


async def wait_for_enter() -> None:
    """Wait until a line (or EOF) arrives on stdin.

    The read runs on a daemon thread so an interrupted run never waits for it.
    """
    loop = asyncio.get_running_loop()
    pressed = loop.create_future()

    def _release() -> None:
        if not pressed.done():
            pressed.set_result(None)

    def _read() -> None:
        sys.stdin.readline()
        if not loop.is_closed():
            loop.call_soon_threadsafe(_release)

    threading.Thread(target=_read, name="stdin-reader", daemon=True).start()
    await pressed


async def run() -> None:
    """Run the fire-and-forget demo until the user presses Enter."""
    setup_logging()
    detection = resolve_detection_mode(os.getenv("FAULTWATCH_DETECTION"))

    app = Application()
    await app.start()
    try:
        scenario = FireAndForgetScenario(
            app.reporter, app.supervisor, detection=detection
        )
        await scenario.run()
        await wait_for_enter()
    finally:
        await app.stop()


def main():
    """Run the application."""
    load_dotenv(PROJECT_ROOT / ".env")

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
