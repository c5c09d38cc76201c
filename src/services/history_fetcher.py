# src/services/history_fetcher.py

"""Client for the external price-history lookup endpoint."""

import logging
from typing import Any

from curl_cffi import CurlError
from curl_cffi.requests import AsyncSession

from src.config.settings import Settings
from src.models.history_entry import HistoryEntry
from src.models.inventory_item import InventoryItem

logger = logging.getLogger("price_spotlight.fetcher")


class FetchFailure(Exception):
    """A history lookup that produced no usable data."""

    def __init__(
        self,
        item: InventoryItem,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"Price history for product {item.product_id} failed: {reason}"
        )
        self.item = item
        self.reason = reason
        self.status_code = status_code


def parse_cookie_header(header: str) -> dict[str, str]:
    """Split a ``name=value; name2=value2`` string into a cookie dict."""
    cookies: dict[str, str] = {}
    for part in header.split(";"):
        name, sep, value = part.strip().partition("=")
        if sep and name:
            cookies[name.strip()] = value.strip()
    return cookies


class HistoryFetcher:
    """Fetches price-change history, one independent GET per call.

    Requests bypass caches (``no-cache`` headers) and carry the configured
    session cookies.  There is no retry: a failed lookup raises
    :class:`FetchFailure` and the next rotation tick is the retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        cookies: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.cookies = (
            cookies
            if cookies is not None
            else parse_cookie_header(self.settings.SESSION_COOKIE)
        )
        self._request_timeout = timeout or self.settings.REQUEST_TIMEOUT
        self._session: AsyncSession | None = None

    def history_url(self, item: InventoryItem) -> str:
        """Return the lookup URL for *item*."""
        path = self.settings.HISTORY_PATH_TEMPLATE.format(
            product_id=item.product_id
        )
        return f"{self.base_url}{path}"

    def _get_session(self) -> AsyncSession:
        if self._session is None:
            self._session = AsyncSession(
                impersonate=self.settings.IMPERSONATE_BROWSER
            )
        return self._session

    async def fetch(self, item: InventoryItem) -> list[HistoryEntry]:
        """GET the history for *item* and parse it into entries.

        Raises:
            FetchFailure: on a non-2xx status, a transport error, or a
                body that is not a JSON array.
        """
        url = self.history_url(item)
        session = self._get_session()
        try:
            resp = await session.get(
                url,
                headers=dict(self.settings.DEFAULT_HEADERS),
                cookies=self.cookies,
                timeout=self._request_timeout,
            )
        except CurlError as exc:
            raise FetchFailure(item, f"transport error: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise FetchFailure(
                item, f"HTTP {resp.status_code}", resp.status_code
            )

        try:
            payload: Any = resp.json()
        except ValueError as exc:
            raise FetchFailure(
                item, "response is not valid JSON", resp.status_code
            ) from exc

        if not isinstance(payload, list):
            raise FetchFailure(
                item,
                f"expected a JSON array, got {type(payload).__name__}",
                resp.status_code,
            )

        entries: list[HistoryEntry] = []
        for raw in payload:
            if not isinstance(raw, dict):
                logger.warning(
                    "Skipping non-object history record for product %d: %r",
                    item.product_id,
                    raw,
                )
                continue
            entries.append(HistoryEntry.from_dict(raw))

        logger.debug(
            "Fetched %d history entries for product %d",
            len(entries),
            item.product_id,
        )
        return entries

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        if self._session is not None:
            session, self._session = self._session, None
            await session.close()
