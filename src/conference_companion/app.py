from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from conference_companion.app_data.client import AppDataClient
from conference_companion.app_data.manager import AppDataManager
from conference_companion.app_data.results import Failed
from conference_companion.config import CompanionConfig, load_config
from conference_companion.models import Session
from conference_companion.session_times import format_session_times

_logger = logging.getLogger(__name__)


def create_manager(config: CompanionConfig) -> AppDataManager:
    client = AppDataClient(
        api_url=config.app_data.api_url,
        cache_file=config.app_data.cache_file,
        image_base_url=config.app_data.image_base_url,
        image_dir=config.app_data.image_dir,
    )
    manager = AppDataManager(client, config.display)
    if config.simulated_time:
        manager.set_alternative_date(config.simulated_time)
    return manager


def describe_session(manager: AppDataManager, session: Session | None) -> str:
    """Describe a session in a single line per session item."""
    if session is None:
        return "Nothing scheduled."

    times = format_session_times(session, manager.settings().zone)
    items = manager.session_item_dictionary()
    titles = [
        items[name].title for name in session.session_item_record_names if name in items
    ]
    lines = [f"{times.start} - {times.end}"]
    lines.extend(f"  {title}" for title in titles)
    return "\n".join(lines)


async def run(config: CompanionConfig, command: str) -> int:
    manager = create_manager(config)

    result = await manager.initialise_data()
    if isinstance(result, Failed):
        # a refresh has to reach the server, queries can use the cached copy
        if command == "refresh" or not await manager.load_local_data():
            _logger.error(result.reason)
            return 1
        _logger.warning(f"{result.reason} Using the cached app data.")
    await manager.wait_for_images()

    now = manager.current_time()
    if command == "now":
        print(describe_session(manager, manager.now_session(now)))
    elif command == "next":
        print(describe_session(manager, manager.next_session(now)))
    else:
        print(f"Loaded {len(manager.sessions())} sessions, {len(manager.speakers())} speakers.")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Conference Companion")
    parser.add_argument("--config-file", type=Path, required=True, help="Configuration file")
    parser.add_argument(
        "command",
        choices=["now", "next", "refresh"],
        help="Show the current or next session, or refresh the local data",
    )
    args = parser.parse_args()

    config = load_config(args.config_file)

    logging.basicConfig(
        level=config.log_level,
        stream=sys.stdout,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        sys.exit(asyncio.run(run(config, args.command)))
    except KeyboardInterrupt:
        _logger.info("Received KeyboardInterrupt, exiting...")


if __name__ == "__main__":
    main()
