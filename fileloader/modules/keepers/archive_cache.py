"""
Shared cache of decoded archives, keyed by absolute URL.

Provides ArchiveCache with:
- One fetch-and-decode per URL, however many callers ask at once
- Waiters resolved in arrival order when the load finishes
- Loads that survive the cancellation of any single caller
- Failed loads dropped so the next caller starts over
"""

import asyncio
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import httpx

from fileloader import config
from fileloader.modules.errors import TransportError
from fileloader.modules.finders.tar_parser import FileRecord, read_tar_file
from fileloader.modules.keepers.loader import FileLoader


@dataclass
class Archive:
    """Cache entry for one archive URL."""
    url: str
    files: Optional[list[FileRecord]] = None
    task: Optional[asyncio.Task] = None

    @property
    def is_loaded(self) -> bool:
        return self.files is not None


class ArchiveCache:
    """
    Async get-or-load cache of decoded tar archives.

    Usage:
        cache = ArchiveCache(base_url="https://example.com/static/")
        files = await cache.get_or_load("bundle.tar")
        loader = await cache.open("bundle.tar")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        auth=None,
    ):
        """
        Args:
            base_url: Base for relative identifiers (defaults to FILELOADER_BASE_URL)
            timeout: Request timeout in seconds (defaults to FILELOADER_TIMEOUT)
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
            auth: httpx auth; defaults to configured basic auth credentials
        """
        self.base_url = config.BASE_URL if base_url is None else base_url
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.transport = transport
        self.auth = auth if auth is not None else config.basic_auth()
        self._archives: dict[str, Archive] = {}

    def absolute_url(self, source: str) -> str:
        """Resolve source against the base URL."""
        return urljoin(self.base_url, source) if self.base_url else source

    def is_loaded(self, source: str) -> bool:
        archive = self._archives.get(self.absolute_url(source))
        return archive is not None and archive.is_loaded

    def is_loading(self, source: str) -> bool:
        archive = self._archives.get(self.absolute_url(source))
        return archive is not None and not archive.is_loaded

    def forget(self, source: str) -> None:
        """Drop a loaded archive so the next request fetches it again."""
        url = self.absolute_url(source)
        archive = self._archives.get(url)
        if archive is not None and archive.is_loaded:
            del self._archives[url]

    def clear(self) -> None:
        """Drop every loaded archive. Loads in flight are left alone."""
        for url in [u for u, a in self._archives.items() if a.is_loaded]:
            del self._archives[url]

    async def fetch(self, url: str) -> bytes:
        """
        Download the archive bytes.

        Raises:
            TransportError: on a non-200 response or connection failure
        """
        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout,
            auth=self.auth,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(url)
            except httpx.RequestError as e:
                raise TransportError(url, reason=str(e)) from e

        if response.status_code != 200:
            raise TransportError(url, response.status_code)
        return response.content

    async def get_or_load(self, source: str) -> list[FileRecord]:
        """
        Return the decoded files of an archive, fetching it at most once.

        The fetch and decode run in a task owned by the cache entry. Every
        caller awaits it through asyncio.shield, so cancelling one caller
        leaves the load and the other callers untouched. Callers arriving
        while a load is in flight receive the same list (or the same error)
        in arrival order.
        """
        url = self.absolute_url(source)
        archive = self._archives.get(url)

        if archive is None:
            archive = self._archives[url] = Archive(url=url)
            archive.task = asyncio.ensure_future(self._load(archive))
        elif archive.is_loaded:
            return archive.files

        return await asyncio.shield(archive.task)

    async def _load(self, archive: Archive) -> list[FileRecord]:
        try:
            data = await self.fetch(archive.url)
            files = read_tar_file(data)
        except BaseException:
            # failed or cancelled loads are dropped so the next call retries
            if self._archives.get(archive.url) is archive:
                del self._archives[archive.url]
            raise

        archive.files = files
        archive.task = None
        return files

    async def open(self, source: str):
        """Load an archive and wrap it in a FileLoader."""
        files = await self.get_or_load(source)
        return FileLoader(files, source=self.absolute_url(source))
