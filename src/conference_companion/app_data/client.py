from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

import aiofiles
import aiohttp

_logger = logging.getLogger(__name__)


class AppDataClient:
    def __init__(self, api_url: str, cache_file: Path, image_base_url: str, image_dir: Path) -> None:
        self._api_url = api_url
        self._cache_file = cache_file
        self._image_base_url = image_base_url.rstrip("/")
        self._image_dir = image_dir

    async def fetch_app_data(self) -> dict | None:
        """Fetch app data from the server and write it to the cache file as backup."""
        try:
            async with (
                aiohttp.ClientSession() as session,
                session.get(self._api_url) as response,
            ):
                response.raise_for_status()
                app_data = await response.json()

        except aiohttp.ClientError as e:
            _logger.warning(f"Error fetching app data: {e}.")
            return None

        _logger.info("App data fetched successfully.")

        # write app data to file in case the server goes down
        _logger.info(f"Writing app data to {self._cache_file}...")
        Path(self._cache_file).parent.mkdir(exist_ok=True, parents=True)
        async with aiofiles.open(self._cache_file, "w") as f:
            await f.write(json.dumps(app_data, indent=2))
        _logger.info("App data written to cache file.")

        return app_data

    async def load_existing_copy_from_local_store(self) -> dict | None:
        """Get the app data from the cache file."""
        try:
            _logger.info(f"Getting app data from cache file {self._cache_file}...")
            async with aiofiles.open(self._cache_file) as f:
                return json.loads(await f.read())

        except FileNotFoundError:
            _logger.info("App data cache file not found.")
        except json.JSONDecodeError:
            _logger.exception(f"App data cache file {self._cache_file} is corrupt.")
        return None

    def image_path(self, record_name: str) -> Path:
        return self._image_dir / record_name

    def image_exists(self, record_name: str) -> bool:
        return _is_plain_file_name(record_name) and self.image_path(record_name).is_file()

    async def download_images(self, record_names: Iterable[str]) -> list[str]:
        """Download images and store them in the image directory.

        Images that cannot be downloaded or stored are skipped, as are
        record names that are not plain file names.

        :param record_names: Record names of the speakers and sponsors
        :return: The record names of the images that were downloaded
        """
        record_names = list(record_names)
        if not record_names:
            return []

        _logger.info(f"Downloading {len(record_names)} images...")
        try:
            self._image_dir.mkdir(exist_ok=True, parents=True)
        except OSError as e:
            _logger.warning(f"Cannot create image directory {self._image_dir}: {e}.")
            return []

        downloaded = []
        async with aiohttp.ClientSession() as session:
            for record_name in record_names:
                if not _is_plain_file_name(record_name):
                    _logger.warning(f"Skipping image with unsafe record name {record_name!r}.")
                    continue

                try:
                    async with session.get(f"{self._image_base_url}/{record_name}") as response:
                        response.raise_for_status()
                        content = await response.read()
                except aiohttp.ClientError as e:
                    _logger.warning(f"Error downloading image {record_name!r}: {e}.")
                    continue

                try:
                    async with aiofiles.open(self.image_path(record_name), "wb") as f:
                        await f.write(content)
                except OSError as e:
                    _logger.warning(f"Error storing image {record_name!r}: {e}.")
                    continue
                downloaded.append(record_name)

        _logger.info(f"Downloaded {len(downloaded)} of {len(record_names)} images.")
        return downloaded


def _is_plain_file_name(record_name: str) -> bool:
    # images are stored directly in the image directory
    return record_name not in {"", ".", ".."} and Path(record_name).name == record_name
