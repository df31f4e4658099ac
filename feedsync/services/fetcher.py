"""
Document fetcher for supplier feeds
"""
import asyncio
import re
from typing import Optional

import httpx

from feedsync.core.config import settings
from feedsync.core.exceptions import FetchError
from feedsync.core.logging import log

XML_ENCODING = re.compile(rb"^\s*<\?xml[^>]*encoding=[\"']([A-Za-z0-9._-]+)[\"']")


def decode_body(response: httpx.Response) -> str:
    """Response text, honouring an XML encoding declaration when no charset header is sent"""
    if response.charset_encoding:
        return response.text

    content = response.content
    match = XML_ENCODING.match(content[:200])
    encoding = match.group(1).decode("ascii") if match else "utf-8"
    try:
        return content.decode(encoding, errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class DocumentFetcher:
    """Fetch a feed document with one bounded request and no retries"""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        user_agent: Optional[str] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.transport = transport
        self.headers = {"User-Agent": user_agent or settings.fetch_user_agent}

    async def fetch(self, url: str) -> str:
        """Full response body as text; raises FetchError on any failure"""
        if not url:
            raise FetchError("Feed URL is empty")

        log.info("Fetching feed", url=url, timeout=self.timeout)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
                response.raise_for_status()
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise FetchError(f"Timed out after {self.timeout:g}s", url=url)
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP {e.response.status_code}", url=url, status=e.response.status_code)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise FetchError(f"{e.__class__.__name__}: {e}", url=url)

        body = decode_body(response)
        log.debug("Fetched feed", url=url, size=len(body))
        return body
