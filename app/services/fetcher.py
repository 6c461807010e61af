import logging
from urllib.parse import urlparse

import httpx

from app.services.documents import demo_fallback_document

logger = logging.getLogger(__name__)

TIMEOUT = 10  # seconds
MAX_CONTENT_SIZE = 2 * 1024 * 1024  # 2 MB
ALLOWED_SCHEMES = {"http", "https"}


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not an absolute http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")


async def fetch_document(
    url: str, timeout: float = TIMEOUT, max_size: int = MAX_CONTENT_SIZE
) -> str:
    """Fetch *url* and return the response body as a string.

    Raises:
        ValueError: if the URL is not an absolute http(s) URL.
        httpx.HTTPError: on network errors, timeouts or a non-2xx status.
        RuntimeError: if the response body exceeds *max_size*.
    """
    _validate_url(url)

    async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
        async with client.stream("GET", url) as response:
            response.raise_for_status()

            # A malformed length is ignored; the streamed cap below still applies.
            content_length = response.headers.get("content-length", "")
            if content_length.isdigit() and int(content_length) > max_size:
                raise RuntimeError("Response body exceeds the maximum allowed size.")

            chunks = []
            total = 0
            async for chunk in response.aiter_bytes():
                total += len(chunk)
                if total > max_size:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")
                chunks.append(chunk)

            return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")


async def load_demo_document(
    url: str, timeout: float = TIMEOUT, max_size: int = MAX_CONTENT_SIZE
) -> str:
    """Return the remote demo page, or the bundled fallback when it cannot be fetched.

    No retries: a single failed attempt falls back immediately.
    """
    try:
        return await fetch_document(url, timeout=timeout, max_size=max_size)
    except ValueError as exc:
        logger.warning("Invalid demo URL %s – %s; serving fallback", url, exc)
    except httpx.TimeoutException:
        logger.warning("Timeout fetching demo %s; serving fallback", url)
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "Demo URL %s returned HTTP %s; serving fallback", url, exc.response.status_code
        )
    except (httpx.HTTPError, RuntimeError) as exc:
        logger.warning("Error fetching demo %s (%s); serving fallback", url, exc)
    return demo_fallback_document()
