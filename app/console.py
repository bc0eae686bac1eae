"""
Indexer Console
Factory wiring the mirror selection and cache management components
"""
import argparse
import asyncio
import sys

from constants import BUILD_VERSION
from settings import load_settings
from utils import configure_logging
from cache_clear import activity_clear_controller, cache_clear_controller
from cache_service import CacheServiceClient
from indexer_sources import IndexerCatalog
from mirrors import MirrorSelectionStore, format_label


class IndexerConsole:
    """Components shared by the indexers page and the settings page"""

    def __init__(self, app_settings):
        self.settings = app_settings
        server = app_settings["server"]
        self.catalog = IndexerCatalog(server["base_url"], timeout=server["timeout"])
        self.cache_service = CacheServiceClient(server["base_url"], timeout=server["timeout"])
        self.mirror_selection = MirrorSelectionStore()

    def new_cache_controller(self):
        """One controller per mounted settings view"""
        return cache_clear_controller(
            self.cache_service, dismiss_after=self.settings["cache"]["dismiss_after"]
        )

    def new_activity_controller(self):
        return activity_clear_controller(
            self.cache_service, dismiss_after=self.settings["cache"]["dismiss_after"]
        )

    async def close(self):
        await self.cache_service.close()


def create_console(app_settings=None):
    return IndexerConsole(app_settings or load_settings())


async def _clear(console, controller):
    controller.trigger()
    await controller.wait()
    message = controller.success_message or controller.error_message or controller.state.status
    controller.dispose()
    await console.close()
    return message


def main(argv=None):
    parser = argparse.ArgumentParser(description="Indexer console")
    parser.add_argument("command", choices=["mirrors", "clear-cache", "clear-activity"])
    args = parser.parse_args(argv)

    logger = configure_logging()
    logger.info(f'Build Version: {BUILD_VERSION}')
    console = create_console()

    if args.command == "mirrors":
        for indexer in console.catalog.fetch():
            labels = [format_label(option) for option in indexer.options()]
            print(f"{indexer.name}: {', '.join(labels) or '-'}")
        return 0

    controller = console.new_cache_controller() if args.command == "clear-cache" else console.new_activity_controller()
    print(asyncio.run(_clear(console, controller)))
    return 0 if controller.error_message is None else 1


if __name__ == '__main__':
    sys.exit(main())
