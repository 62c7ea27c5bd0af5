"""Deliver export notifications to an HTTP webhook."""

import logging
from typing import Any, Dict, Optional

import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from record_export.errors import NotificationError
from record_export.stores.base import NotificationChannel

logger = logging.getLogger(__name__)


class WebhookChannel(NotificationChannel):
    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self._url = url
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "record-export/0.1.0"})
        self._timeout = timeout

    def publish(self, subject: str, text_body: str, structured_body: Dict[str, Any]) -> None:
        payload = dict(structured_body)
        payload.setdefault("subject", subject)
        payload.setdefault("message", text_body)
        logger.info("Posting export notification to %s", self._url)
        try:
            self._post_with_retry(payload)
        except requests.RequestException as exc:
            raise NotificationError(f"Webhook {self._url} rejected notification: {exc}") from exc

    # Connection failures and 429s never reached the receiver; nothing else is retried.
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(requests.ConnectionError),
        reraise=True,
    )
    def _post_with_retry(self, payload: Dict[str, Any]) -> requests.Response:
        resp = self._session.post(self._url, json=payload, timeout=self._timeout)
        if resp.status_code == 429:
            raise requests.ConnectionError("Rate limited (429)")
        resp.raise_for_status()
        return resp
