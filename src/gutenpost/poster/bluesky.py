"""Bluesky posting client over the AT Protocol XRPC API.

This module posts chunks as single posts or reply-chains. It provides:
- BlueskySession: an explicitly passed session handle that logs in lazily on
  first use and reuses the login afterwards
- post_single / post_thread / post: posting helpers returning the root post
- Retry logic with exponential backoff for transient failures

HTTP endpoints:
- Login: POST {service_url}/xrpc/com.atproto.server.createSession
- Post: POST {service_url}/xrpc/com.atproto.repo.createRecord
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from json import JSONDecodeError
from types import TracebackType
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class BlueskyError(Exception):
    """Base exception for all Bluesky client errors."""

    pass


class BlueskyAuthError(BlueskyError):
    """Raised when credentials are missing or rejected."""

    pass


class BlueskyRequestError(BlueskyError):
    """Raised when a request fails after all retries or is rejected."""

    pass


# =============================================================================
# CONSTANTS
# =============================================================================

POST_COLLECTION = "app.bsky.feed.post"
CREATE_SESSION = "com.atproto.server.createSession"
CREATE_RECORD = "com.atproto.repo.createRecord"

HANDLE_ENV = "BLUESKY_HANDLE"
PASSWORD_ENV = "BLUESKY_PASSWORD"

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


# =============================================================================
# CONFIGURATION AND DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class BlueskyConfig:
    """Configuration for the Bluesky connection.

    Attributes:
        service_url: PDS base URL (default: "https://bsky.social")
        timeout_seconds: Request timeout in seconds
        max_retries: Maximum retry attempts for transient failures
        retry_delay_seconds: Base delay between retries (exponential backoff)
    """

    service_url: str = "https://bsky.social"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must be non-negative")


@dataclass(frozen=True)
class PostRef:
    """Strong reference to a created post."""

    uri: str
    cid: str

    def as_dict(self) -> dict[str, str]:
        return {"uri": self.uri, "cid": self.cid}


@dataclass(frozen=True)
class _Login:
    did: str
    access_jwt: str


# =============================================================================
# SESSION
# =============================================================================


class BlueskySession:
    """Lazily authenticated Bluesky session.

    The session logs in on the first call that needs it and reuses the
    access token for the rest of its lifetime. Create one per run and pass it
    to the posting helpers.

    Usage:
        with BlueskySession.from_env(BlueskyConfig()) as session:
            post_thread(session, ["first", "second"])
    """

    def __init__(
        self,
        handle: str | None,
        password: str | None,
        config: BlueskyConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.handle = handle
        self._password = password
        self.config = config or BlueskyConfig()
        self._client = client or httpx.Client(timeout=self.config.timeout_seconds)
        self._login: _Login | None = None

    @classmethod
    def from_env(cls, config: BlueskyConfig | None = None) -> BlueskySession:
        """Create a session using BLUESKY_HANDLE and BLUESKY_PASSWORD."""
        return cls(os.getenv(HANDLE_ENV), os.getenv(PASSWORD_ENV), config)

    @property
    def is_logged_in(self) -> bool:
        return self._login is not None

    def acquire(self) -> _Login:
        """Return the active login, logging in first if needed.

        Raises:
            BlueskyAuthError: If credentials are missing or rejected
        """
        if self._login is not None:
            return self._login

        if not self.handle or not self._password:
            raise BlueskyAuthError(f"Missing {HANDLE_ENV} or {PASSWORD_ENV} environment variables")

        try:
            data = self._xrpc(
                CREATE_SESSION,
                {"identifier": self.handle, "password": self._password},
            )
        except BlueskyRequestError as e:
            raise BlueskyAuthError(f"Login failed for {self.handle}: {e}") from e

        did, access_jwt = _require_fields(CREATE_SESSION, data, "did", "accessJwt")
        self._login = _Login(did=did, access_jwt=access_jwt)
        logger.info("Logged in as %s", self.handle)
        return self._login

    def create_post(self, text: str, reply_to: tuple[PostRef, PostRef] | None = None) -> PostRef:
        """Create one post, optionally as a reply.

        Args:
            text: Post text
            reply_to: (root, parent) references when replying

        Returns:
            Reference to the new post
        """
        login = self.acquire()
        record: dict[str, Any] = {
            "$type": POST_COLLECTION,
            "text": text,
            "createdAt": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        if reply_to is not None:
            root, parent = reply_to
            record["reply"] = {"root": root.as_dict(), "parent": parent.as_dict()}

        data = self._xrpc(
            CREATE_RECORD,
            {"repo": login.did, "collection": POST_COLLECTION, "record": record},
            access_jwt=login.access_jwt,
        )
        uri, cid = _require_fields(CREATE_RECORD, data, "uri", "cid")
        return PostRef(uri=uri, cid=cid)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BlueskySession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _xrpc(
        self,
        method: str,
        payload: dict[str, Any],
        access_jwt: str | None = None,
    ) -> dict[str, Any]:
        """POST to an XRPC procedure with retry on transient failures.

        Raises:
            BlueskyRequestError: If the request is rejected or all retries fail
        """
        url = f"{self.config.service_url}/xrpc/{method}"
        headers = {"Authorization": f"Bearer {access_jwt}"} if access_jwt else {}
        max_attempts = self.config.max_retries + 1
        last_error: BlueskyRequestError | None = None

        for attempt in range(max_attempts):
            try:
                response = self._client.post(url, json=payload, headers=headers)
            except httpx.TransportError as e:
                last_error = BlueskyRequestError(f"{method} transport error: {e}")
            else:
                if response.status_code in RETRYABLE_STATUS_CODES:
                    last_error = BlueskyRequestError(
                        f"{method} returned {response.status_code}: {_error_message(response)}"
                    )
                elif response.status_code != 200:
                    raise BlueskyRequestError(
                        f"{method} returned {response.status_code}: {_error_message(response)}"
                    )
                else:
                    try:
                        data: dict[str, Any] = response.json()
                    except JSONDecodeError as e:
                        raise BlueskyRequestError(f"{method} returned invalid JSON: {e}") from e
                    return data

            if attempt < max_attempts - 1:
                delay = self.config.retry_delay_seconds * (2**attempt)
                logger.warning(
                    "%s (attempt %d/%d), retrying in %.1fs",
                    last_error,
                    attempt + 1,
                    max_attempts,
                    delay,
                )
                time.sleep(delay)

        if last_error is not None:
            raise last_error
        raise BlueskyRequestError(f"Unexpected error in {method} retry loop")


def _require_fields(method: str, data: Any, *keys: str) -> list[str]:
    """Pull required string fields out of a successful XRPC response body.

    Raises:
        BlueskyRequestError: If the body is not an object or lacks a field
    """
    if not isinstance(data, dict):
        raise BlueskyRequestError(f"{method} response is not a JSON object")

    missing = [key for key in keys if not isinstance(data.get(key), str)]
    if missing:
        raise BlueskyRequestError(f"{method} response missing {', '.join(missing)}")
    return [data[key] for key in keys]


def _error_message(response: httpx.Response) -> str:
    """Extract the XRPC error message from a failed response."""
    try:
        data = response.json()
    except JSONDecodeError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)


# =============================================================================
# POSTING
# =============================================================================


def post_single(session: BlueskySession, text: str) -> PostRef:
    """Create a standalone post."""
    return session.create_post(text)


def post_thread(session: BlueskySession, chunks: list[str]) -> PostRef:
    """Post chunks as a reply-chain rooted at the first chunk.

    Every reply names the first post as root and the previous post as parent.

    Args:
        session: Bluesky session
        chunks: Post texts in order

    Returns:
        Reference to the root post

    Raises:
        ValueError: If chunks is empty
    """
    if not chunks:
        raise ValueError("Cannot post empty thread")

    root = session.create_post(chunks[0])
    parent = root
    for text in chunks[1:]:
        parent = session.create_post(text, reply_to=(root, parent))

    logger.debug("Posted thread of %d posts rooted at %s", len(chunks), root.uri)
    return root


def post(session: BlueskySession, chunks: list[str]) -> PostRef:
    """Post one chunk as a single post, or several as a thread."""
    if len(chunks) == 1:
        return post_single(session, chunks[0])
    return post_thread(session, chunks)
