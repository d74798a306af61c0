"""Read source images from the public directory or over HTTP."""

import threading
from os import PathLike
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx
from loguru import logger

from ..common.errors import SourceUnreachableError


class SourceFetcher:
    """Open a source URL for reading.

    URLs under `base_url` and bare paths are served from `public_dir` without
    a network round-trip; any other ``http(s)`` URL is fetched with httpx.
    """

    def __init__(
        self,
        public_dir: str | PathLike[str],
        base_url: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.public_dir: Path = Path(public_dir).expanduser().resolve()
        self.base_url: str = base_url.rstrip("/")
        self.timeout: float = timeout
        self._client: httpx.Client | None = client
        self._client_lock: threading.Lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
            return self._client

    def close(self) -> None:
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _is_root(self, url: str) -> bool:
        return not url or url == "/" or url.rstrip("/") == self.base_url

    def local_path(self, url: str) -> Path | None:
        """Filesystem path for `url`, or None when it has to be fetched remotely."""
        if self.base_url and (url == self.base_url or url.startswith(self.base_url + "/")):
            relative = unquote(urlsplit(url[len(self.base_url) :]).path)
        else:
            parts = urlsplit(url)
            if parts.scheme in ("http", "https"):
                return None
            if parts.scheme:
                raise SourceUnreachableError(url, f"unsupported scheme '{parts.scheme}'")
            relative = unquote(parts.path)

        path = (self.public_dir / relative.lstrip("/")).resolve()
        if self.public_dir not in path.parents:
            raise SourceUnreachableError(url, "outside the public directory")
        return path

    def exists(self, url: str) -> bool:
        """True if `url` can be opened for reading. Remote bodies are not downloaded."""
        if self._is_root(url):
            return False
        try:
            path = self.local_path(url)
        except SourceUnreachableError:
            return False
        if path is not None:
            return path.is_file()

        try:
            with self.client.stream("GET", url) as response:
                _ = response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Source {url} is not reachable: {e}")
            return False
        return True

    def read(self, url: str) -> bytes:
        """
        Return the raw bytes behind `url`.

        Raises:
            SourceUnreachableError: If the URL is empty, the root path, or
                cannot be opened for reading.
        """
        if self._is_root(url):
            raise SourceUnreachableError(url, "empty source")

        path = self.local_path(url)
        if path is not None:
            try:
                return path.read_bytes()
            except OSError as e:
                raise SourceUnreachableError(url, str(e)) from e

        try:
            response = self.client.get(url)
            _ = response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            raise SourceUnreachableError(url, str(e)) from e
        return response.content
