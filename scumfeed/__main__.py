"""
SCUM Feed - Entry Point
python -m scumfeed --config config.json
"""

import argparse
import asyncio
import logging
import signal
import sys

from . import __version__
from .config import build_sources, configure_logging, load_settings
from .errors import ConfigError, SourceInitError
from .models.database import create_cursor_store
from .parsers.categories import CATEGORIES, build_pipeline
from .parsers.dispatcher import Dispatcher
from .parsers.orchestrator import PollOrchestrator
from .utils.notifier import WebhookNotifier

logger = logging.getLogger('scumfeed')


async def run(settings, once: bool = False) -> int:
    store = create_cursor_store(settings)
    notifier = WebhookNotifier(username=settings.username, avatar_url=settings.avatar_url)
    dispatcher = Dispatcher(notifier, timeout=settings.dispatch_timeout)
    orchestrator = PollOrchestrator(notifier=notifier)

    for source in build_sources(settings, CATEGORIES):
        try:
            pipeline = build_pipeline(source, store, dispatcher)
        except SourceInitError as e:
            if source.enabled:
                logger.error(f"Source {source.name} not started: {e}")
            else:
                logger.debug(f"Source {source.name} not started: {e}")
            continue
        await orchestrator.add_pipeline(pipeline)

    if not orchestrator.pipelines:
        logger.error("No log sources could be started, nothing to do")
        await orchestrator.shutdown()
        return 1

    if once:
        await orchestrator.tick_all()
        await orchestrator.shutdown()
        return 0

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handlers
            signal.signal(signum, lambda *_: loop.call_soon_threadsafe(stop.set))

    orchestrator.start()
    logger.info(f"SCUM Feed {__version__} watching {settings.log_directory}")
    await stop.wait()

    logger.info("Shutting down, waiting for in-flight ticks")
    await orchestrator.shutdown()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog='scumfeed', description='Relay SCUM server log events to Discord')
    parser.add_argument('--config', '-c', default='config.json', help='path to the JSON configuration file')
    parser.add_argument('--once', action='store_true', help='poll every source once and exit')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        configure_logging()
        logger.error(f"Configuration error: {e}")
        return 2

    configure_logging(settings.log_level, settings.log_file)
    return asyncio.run(run(settings, once=args.once))


if __name__ == '__main__':
    sys.exit(main())
