"""External documentation index.

Each registered API documentation site is fetched once, in the background,
from its ``overview-tree.html`` page. Every name listed under the
``.horizontal`` element is mapped to the site's base URL. Fetches retry with
a fixed delay; a site that never answers simply contributes no names.

The index runs its own event loop on a daemon thread so the synchronous
build can keep visiting declarations while fetches are in flight. `wait()`
is the completion barrier.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future
from concurrent.futures import wait as wait_futures
from html.parser import HTMLParser
from typing import Any

import httpx
from loguru import logger

from jdocsite.core.constants import (
    DEFAULT_FETCH_RETRY_ATTEMPTS,
    DEFAULT_FETCH_RETRY_DELAY,
    OVERVIEW_PAGE,
    OVERVIEW_SELECTOR_CLASS,
)
from jdocsite.core.exceptions import ExternalDocFetchError


class _OverviewParser(HTMLParser):
    """Collect anchor texts nested under elements with a given class."""

    def __init__(self, selector_class: str):
        super().__init__(convert_charrefs=True)
        self.selector_class = selector_class
        self.names: list[str] = []
        self._container: str | None = None
        self._depth = 0
        self._anchor: list[str] | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._container is None:
            classes = (dict(attrs).get("class") or "").split()
            if self.selector_class in classes:
                self._container = tag
                self._depth = 1
            return
        if tag == self._container:
            self._depth += 1
        elif tag == "a":
            self._anchor = []

    def handle_endtag(self, tag: str) -> None:
        if self._container is None:
            return
        if tag == "a" and self._anchor is not None:
            name = "".join(self._anchor).strip()
            if name:
                self.names.append(name)
            self._anchor = None
        elif tag == self._container:
            self._depth -= 1
            if self._depth == 0:
                self._container = None

    def handle_data(self, data: str) -> None:
        if self._anchor is not None:
            self._anchor.append(data)


def parse_overview_names(html: str, selector_class: str = OVERVIEW_SELECTOR_CLASS) -> list[str]:
    """Names linked from ``.<selector_class> a`` in an overview page."""
    parser = _OverviewParser(selector_class)
    parser.feed(html)
    parser.close()
    return parser.names


class ExternalDocIndex:
    """Name to documentation base URL, populated asynchronously."""

    def __init__(
        self,
        retry_attempts: int = DEFAULT_FETCH_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_FETCH_RETRY_DELAY,
        http_timeout: float = 10.0,
        client_kwargs: dict[str, Any] | None = None,
    ):
        self._retry_attempts = max(1, retry_attempts)
        self._retry_delay = retry_delay
        self._client_kwargs: dict[str, Any] = {
            "timeout": http_timeout,
            "follow_redirects": True,
        }
        if client_kwargs:
            self._client_kwargs.update(client_kwargs)

        self._names: dict[str, str] = {}
        self._names_lock = threading.Lock()
        self._futures: dict[str, Future[int]] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._loop_lock = threading.Lock()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._loop_lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="external-doc-fetch", daemon=True
                )
                thread.start()
                self._loop = loop
                self._thread = thread
            return self._loop

    def register(self, *urls: str) -> None:
        """Schedule a fetch per base URL. Already registered URLs are ignored."""
        for url in urls:
            if url in self._futures:
                continue
            loop = self._ensure_loop()
            self._futures[url] = asyncio.run_coroutine_threadsafe(self._fetch(url), loop)
            logger.debug(f"Scheduled external documentation fetch: {url}")

    @property
    def registered(self) -> list[str]:
        return list(self._futures)

    async def _fetch(self, url: str) -> int:
        """Fetch and index one site. Returns the number of names added."""
        overview = url + OVERVIEW_PAGE
        async with httpx.AsyncClient(**self._client_kwargs) as client:
            for attempt in range(self._retry_attempts):
                try:
                    response = await client.get(overview)
                    if response.status_code != 200:
                        raise ExternalDocFetchError(overview, f"HTTP {response.status_code}")
                    names = parse_overview_names(response.text)
                    return self._insert(names, url)
                except (httpx.HTTPError, ExternalDocFetchError) as e:
                    if attempt < self._retry_attempts - 1:
                        logger.warning(
                            f"Fetching {overview} failed (attempt {attempt + 1}), "
                            f"retrying in {self._retry_delay}s: {e}"
                        )
                        await asyncio.sleep(self._retry_delay)
                        continue
                    logger.warning(
                        f"Giving up on {overview} after {attempt + 1} attempts: {e}"
                    )
        return 0

    def _insert(self, names: list[str], url: str) -> int:
        added = 0
        with self._names_lock:
            for name in names:
                if name not in self._names:
                    self._names[name] = url
                    added += 1
        logger.info(f"Indexed {added} names from {url}")
        return added

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every registered fetch settles.

        Args:
            timeout: Upper bound for the whole wait, None waits forever

        Returns:
            True if all fetches settled, False if the timeout expired first
            (outstanding fetches are cancelled)
        """
        futures = list(self._futures.values())
        if not futures:
            return True
        _, pending = wait_futures(futures, timeout=timeout)
        if pending:
            logger.warning(
                f"{len(pending)} external documentation fetches did not finish "
                f"within {timeout}s; their names stay unresolved"
            )
            for future in pending:
                future.cancel()
            return False
        return True

    def lookup(self, name: str) -> str | None:
        with self._names_lock:
            return self._names.get(name)

    def __len__(self) -> int:
        with self._names_lock:
            return len(self._names)

    def close(self) -> None:
        """Stop the background loop. Outstanding fetches are cancelled."""
        with self._loop_lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        for future in self._futures.values():
            future.cancel()
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
            if thread is not None:
                thread.join(timeout=5.0)
            if not loop.is_running():
                loop.close()
