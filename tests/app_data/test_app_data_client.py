import json

import aiofiles
import pytest


@pytest.mark.asyncio
async def test_fetch_app_data(app_data_client, cache_file, mock_app_data):
    app_data = await app_data_client.fetch_app_data()

    assert app_data == mock_app_data
    async with aiofiles.open(cache_file) as f:
        cached_data = json.loads(await f.read())
        assert cached_data == mock_app_data


@pytest.mark.asyncio
async def test_fetch_app_data_error_handling(broken_client, cache_file):
    assert await broken_client.fetch_app_data() is None
    assert not cache_file.exists()


@pytest.mark.asyncio
async def test_load_existing_copy(app_data_client, cache_file, mock_app_data):
    cache_file.parent.mkdir(parents=True)
    async with aiofiles.open(cache_file, "w") as f:
        await f.write(json.dumps(mock_app_data))

    assert await app_data_client.load_existing_copy_from_local_store() == mock_app_data


@pytest.mark.asyncio
async def test_load_existing_copy_without_cache(app_data_client):
    assert await app_data_client.load_existing_copy_from_local_store() is None


@pytest.mark.asyncio
async def test_load_existing_copy_with_corrupt_cache(app_data_client, cache_file):
    cache_file.parent.mkdir(parents=True)
    cache_file.write_text("{not json")

    assert await app_data_client.load_existing_copy_from_local_store() is None


@pytest.mark.asyncio
async def test_download_images(app_data_client, image_dir):
    downloaded = await app_data_client.download_images(["speaker-zoe", "sponsor-gold"])

    # the server has no image for the gold sponsor
    assert downloaded == ["speaker-zoe"]
    assert (image_dir / "speaker-zoe").read_bytes() == b"image of speaker-zoe"
    assert app_data_client.image_exists("speaker-zoe")
    assert not app_data_client.image_exists("sponsor-gold")


@pytest.mark.asyncio
async def test_download_no_images(app_data_client, image_dir):
    assert await app_data_client.download_images([]) == []
    assert not image_dir.exists()


@pytest.mark.asyncio
async def test_download_images_skips_names_outside_image_dir(app_data_client, tmp_path):
    downloaded = await app_data_client.download_images(
        ["team/anna", "../escape", "..", "speaker-zoe"]
    )

    assert downloaded == ["speaker-zoe"]
    assert not (tmp_path / "escape").exists()
    assert not app_data_client.image_exists("../escape")


@pytest.mark.asyncio
async def test_download_images_skips_images_that_cannot_be_stored(app_data_client, image_dir):
    # a directory in the way makes writing the file fail
    (image_dir / "speaker-zoe").mkdir(parents=True)

    downloaded = await app_data_client.download_images(["speaker-zoe", "speaker-emile"])

    assert downloaded == ["speaker-emile"]
    assert (image_dir / "speaker-emile").read_bytes() == b"image of speaker-emile"
