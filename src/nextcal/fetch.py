from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"


class CalendarFetchError(RuntimeError):
    pass


class _RedactUrlFilter(logging.Filter):
    """Keeps the calendar URL (which usually embeds a private token) out of logs."""

    def __init__(self, url: str) -> None:
        super().__init__()
        self.url = url

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.url:
            return True
        message = record.getMessage()
        scrubbed = _scrub(message, self.url)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


def install_redaction_filter(url: str) -> None:
    # Records from child loggers skip the root logger's own filters, so the
    # filter goes on the root handlers instead.
    for handler in logging.getLogger().handlers:
        for f in list(handler.filters):
            if isinstance(f, _RedactUrlFilter):
                handler.removeFilter(f)
        if url:
            handler.addFilter(_RedactUrlFilter(url))


def redact(url: str) -> str:
    return REDACTED if url else "unset"


def _scrub(message: str, url: str) -> str:
    """Remove the URL and its path/query (where private tokens live) from a message."""
    parsed = urlparse(url)
    secrets = [url]
    if parsed.query:
        secrets.append(f"{parsed.path}?{parsed.query}")
        secrets.append(parsed.query)
    if len(parsed.path) > 1:
        secrets.append(parsed.path)
    for secret in secrets:
        message = message.replace(secret, REDACTED)
    return message


def save_debug_copy(data: bytes, directory: str, now: Optional[datetime]) -> Path:
    """Write fetched calendar bytes to ``directory/YYYY-MM-DD-HH-MM.ics``."""
    stamp = now.strftime("%Y-%m-%d-%H-%M") if now is not None else "unknown"
    path = Path(directory) / f"{stamp}.ics"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.debug("Saved ICS copy to %s", path)
    return path


class CalendarFetcher:
    """Loads calendar bytes from an http(s) URL, a file:// URL or a plain path."""

    def __init__(self, timeout: float = 10.0, user_agent: str = "nextcal/1.0") -> None:
        self.timeout = timeout
        self._session: Optional[requests.Session] = None
        self._user_agent = user_agent

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"User-Agent": self._user_agent})
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "CalendarFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, source: str) -> bytes:
        if not source:
            raise CalendarFetchError("No ICS URL configured")

        parsed = urlparse(source)
        if parsed.scheme in ("http", "https", "webcal"):
            return self._fetch_http(source, parsed.scheme)
        if parsed.scheme == "file":
            return self._read_file(Path(parsed.path))
        return self._read_file(Path(source))

    def _fetch_http(self, url: str, scheme: str) -> bytes:
        if scheme == "webcal":
            url = "https" + url[len("webcal"):]
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CalendarFetchError(f"Fetch failed: {_scrub(str(e), url)}") from e
        logger.debug("Fetched ICS (%d bytes)", len(resp.content))
        return resp.content

    def _read_file(self, path: Path) -> bytes:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CalendarFetchError(f"Read failed: {e}") from e
        logger.debug("Read ICS from %s (%d bytes)", path, len(data))
        return data
