"""
SVG downloader tests

Covers output directory handling, file naming, parallel download and
partial failure behavior.
"""

import asyncio
import sys

import httpx
import pytest
import respx

from figma_svg_export.downloader import SvgDownloader, build_file_paths, clean_output_dir, ensure_output_dir
from figma_svg_export.exceptions import DownloadError
from figma_svg_export.models import FileNameStrategy

from conftest import CDN_URL, SVG_BODY


# ============================================
# Output directory
# ============================================

@pytest.mark.asyncio
async def test_ensure_output_dir_is_idempotent(tmp_path):
    target = tmp_path / "a" / "b"

    await ensure_output_dir(target)
    await ensure_output_dir(target)

    assert target.is_dir()


@pytest.mark.asyncio
async def test_ensure_output_dir_failure(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("not a directory")

    with pytest.raises(DownloadError) as exc_info:
        await ensure_output_dir(blocker / "sub")

    assert "Failed to create output directory" in str(exc_info.value)


@pytest.mark.asyncio
async def test_clean_output_dir_removes_everything(tmp_path):
    target = tmp_path / "out"
    (target / "nested").mkdir(parents=True)
    (target / "old-file.svg").write_text("<svg/>")
    (target / "nested" / "other.svg").write_text("<svg/>")

    await clean_output_dir(target)

    assert not target.exists()


@pytest.mark.asyncio
async def test_clean_missing_output_dir(tmp_path):
    await clean_output_dir(tmp_path / "missing")


# ============================================
# File naming
# ============================================

def test_build_file_paths_applies_strategy(tmp_path):
    paths = build_file_paths({"icon-home": "u1", "Arrow Left": "u2"}, tmp_path, FileNameStrategy.PASCAL)

    assert paths == {
        "icon-home": str(tmp_path / "IconHome.svg"),
        "Arrow Left": str(tmp_path / "ArrowLeft.svg"),
    }


def test_build_file_paths_rejects_collisions(tmp_path):
    with pytest.raises(DownloadError) as exc_info:
        build_file_paths({"icon-home": "u1", "Icon Home": "u2"}, tmp_path, "kebab")

    assert "icon-home" in str(exc_info.value)
    assert "Icon Home" in str(exc_info.value)


# ============================================
# Downloads
# ============================================

class TestDownloadAll:

    @pytest.mark.asyncio
    @respx.mock
    async def test_downloads_every_file_in_order(self, tmp_path):
        urls = {f"icon-{i}": f"{CDN_URL}/{i}.svg" for i in range(5)}
        for i in range(5):
            respx.get(f"{CDN_URL}/{i}.svg").mock(return_value=httpx.Response(200, content=SVG_BODY))

        async with SvgDownloader() as downloader:
            written = await downloader.download_all(urls, tmp_path, FileNameStrategy.SNAKE)

        assert written == [str(tmp_path / f"icon_{i}.svg") for i in range(5)]
        assert all((tmp_path / f"icon_{i}.svg").read_bytes() == SVG_BODY for i in range(5))

    @pytest.mark.asyncio
    @respx.mock
    async def test_progress_called_per_file(self, tmp_path):
        urls = {"a": f"{CDN_URL}/a.svg", "b": f"{CDN_URL}/b.svg"}
        respx.get(url__startswith=CDN_URL).mock(return_value=httpx.Response(200, content=SVG_BODY))
        reported = []

        async with SvgDownloader() as downloader:
            written = await downloader.download_all(urls, tmp_path, on_progress=reported.append)

        assert sorted(reported) == sorted(written)

    @pytest.mark.asyncio
    @respx.mock
    async def test_overwrites_existing_file(self, tmp_path):
        (tmp_path / "icon-home.svg").write_text("stale")
        respx.get(f"{CDN_URL}/x.svg").mock(return_value=httpx.Response(200, content=SVG_BODY))

        async with SvgDownloader() as downloader:
            await downloader.download_all({"icon-home": f"{CDN_URL}/x.svg"}, tmp_path)

        assert (tmp_path / "icon-home.svg").read_bytes() == SVG_BODY

    @pytest.mark.asyncio
    @respx.mock
    async def test_one_failure_fails_all_but_keeps_successes(self, tmp_path):
        respx.get(f"{CDN_URL}/ok.svg").mock(return_value=httpx.Response(200, content=SVG_BODY))
        respx.get(f"{CDN_URL}/broken.svg").mock(return_value=httpx.Response(500, text="upstream exploded"))

        async with SvgDownloader() as downloader:
            with pytest.raises(DownloadError) as exc_info:
                await downloader.download_all(
                    {"ok": f"{CDN_URL}/ok.svg", "broken": f"{CDN_URL}/broken.svg"},
                    tmp_path,
                )

        message = str(exc_info.value)
        assert f"{CDN_URL}/broken.svg" in message
        assert "500" in message
        assert "upstream exploded" in message
        assert (tmp_path / "ok.svg").read_bytes() == SVG_BODY
        assert not (tmp_path / "broken.svg").exists()

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error(self, tmp_path):
        respx.get(f"{CDN_URL}/x.svg").mock(side_effect=httpx.ConnectTimeout("timed out"))

        async with SvgDownloader() as downloader:
            with pytest.raises(DownloadError):
                await downloader.download_all({"x": f"{CDN_URL}/x.svg"}, tmp_path)

    @pytest.mark.asyncio
    @respx.mock
    async def test_write_failure(self, tmp_path):
        respx.get(f"{CDN_URL}/x.svg").mock(return_value=httpx.Response(200, content=SVG_BODY))

        async with SvgDownloader() as downloader:
            with pytest.raises(DownloadError) as exc_info:
                await downloader.download_all({"x": f"{CDN_URL}/x.svg"}, tmp_path / "missing-dir")

        assert "Failed to write SVG" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_input(self, tmp_path):
        async with SvgDownloader() as downloader:
            assert await downloader.download_all({}, tmp_path) == []


def test_build_file_paths_keeps_non_latin_names_apart(tmp_path):
    paths = build_file_paths({"首页": "u1", "设置": "u2", "café": "u3"}, tmp_path)

    assert paths == {
        "首页": str(tmp_path / "首页.svg"),
        "设置": str(tmp_path / "设置.svg"),
        "café": str(tmp_path / "café.svg"),
    }


# ============================================
# Concurrency
# ============================================

class TestDownloadConcurrency:

    @pytest.mark.asyncio
    async def test_connection_pool_is_unbounded(self):
        async with SvgDownloader() as downloader:
            pool = downloader.http_client._transport._pool

            assert pool._max_connections in (None, sys.maxsize)
            assert downloader.http_client.timeout.pool is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_every_download_is_in_flight_at_once(self, tmp_path):
        total = 150
        urls = {f"icon-{i}": f"{CDN_URL}/{i}.svg" for i in range(total)}
        all_arrived = asyncio.Event()
        state = {"in_flight": 0, "peak": 0}

        async def slow_cdn(request):
            state["in_flight"] += 1
            state["peak"] = max(state["peak"], state["in_flight"])
            if state["in_flight"] == total:
                all_arrived.set()
            await asyncio.wait_for(all_arrived.wait(), timeout=5)
            state["in_flight"] -= 1
            return httpx.Response(200, content=SVG_BODY)

        respx.get(url__startswith=CDN_URL).mock(side_effect=slow_cdn)

        async with SvgDownloader() as downloader:
            written = await downloader.download_all(urls, tmp_path)

        assert state["peak"] == total
        assert len(written) == total

    @pytest.mark.asyncio
    @respx.mock
    async def test_first_failure_to_occur_is_reported(self, tmp_path):
        async def slow_failure(request):
            await asyncio.sleep(0.2)
            return httpx.Response(500, text="slow failure")

        respx.get(f"{CDN_URL}/slow.svg").mock(side_effect=slow_failure)
        respx.get(f"{CDN_URL}/fast.svg").mock(return_value=httpx.Response(404, text="fast failure"))

        async with SvgDownloader() as downloader:
            with pytest.raises(DownloadError) as exc_info:
                await downloader.download_all(
                    {"slow": f"{CDN_URL}/slow.svg", "fast": f"{CDN_URL}/fast.svg"},
                    tmp_path,
                )

        assert "fast failure" in str(exc_info.value)
        assert "slow failure" not in str(exc_info.value)

    @pytest.mark.asyncio
    @respx.mock
    async def test_progress_callback_error_fails_the_download(self, tmp_path):
        respx.get(f"{CDN_URL}/x.svg").mock(return_value=httpx.Response(200, content=SVG_BODY))

        def broken_progress(path):
            raise RuntimeError("display went away")

        async with SvgDownloader() as downloader:
            with pytest.raises(DownloadError) as exc_info:
                await downloader.download_all({"x": f"{CDN_URL}/x.svg"}, tmp_path, on_progress=broken_progress)

        assert "display went away" in str(exc_info.value)
