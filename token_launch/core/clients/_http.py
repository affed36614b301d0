import time
from typing import Any

import httpx
from loguru import logger

from token_launch.core.errors import CollaboratorError


async def request_json(
    client: httpx.AsyncClient,
    service: str,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    """Single request with timing logs; transport and status failures become CollaboratorError."""
    logger.debug(f"Making {method} request to {url}")
    start_time = time.time()
    try:
        resp = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        raise CollaboratorError(service, f"request to {url} timed out") from exc
    except httpx.HTTPError as exc:
        raise CollaboratorError(service, f"request to {url} failed: {exc}") from exc

    elapsed = time.time() - start_time
    if resp.status_code >= 400:
        logger.warning(
            f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
        )
    else:
        logger.debug(
            f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
        )

    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise CollaboratorError(
            service,
            f"HTTP {resp.status_code} from {url}",
            retryable=resp.status_code >= 500 or resp.status_code == 429,
        ) from exc

    try:
        return resp.json()
    except ValueError as exc:
        raise CollaboratorError(
            service, f"non-JSON response from {url}", retryable=False
        ) from exc
