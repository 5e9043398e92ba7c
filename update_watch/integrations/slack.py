from __future__ import annotations

from typing import Any, Dict

import httpx

from update_watch.core.config import MonitorConfig
from update_watch.core.errors import Err, EventKind, Ok, Result
from update_watch.core.utils import http_post_json


def post_message(
    text: str,
    base_url: str,
    token: str,
    channel: str,
    timeout: float = 15,
) -> Dict[str, Any]:
    url = f"{base_url.rstrip('/')}/api/chat.postMessage"
    payload = {
        "channel": channel,
        "text": text,
    }
    headers = {"Authorization": f"Bearer {token}"}
    return http_post_json(url, payload, headers=headers, timeout=timeout)


class SlackNotifier:
    """Notifier that posts the run summary to a Slack-compatible chat API."""

    def __init__(self, config: MonitorConfig) -> None:
        self._base_url = config.slack_base
        self._token = config.slack_bearer
        self._channel = config.slack_channel
        self._timeout = config.slack_timeout_s

    def send(self, text: str) -> Result[Dict[str, Any]]:
        try:
            resp = post_message(
                text,
                base_url=self._base_url,
                token=self._token,
                channel=self._channel,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            return Err(EventKind.NOTIFICATION_TRANSPORT_ERROR, f"Slack post failed: {e}")
        # Slack reports API-level failures with HTTP 200 and ok=false
        if resp.get("ok") is False:
            return Err(
                EventKind.NOTIFICATION_TRANSPORT_ERROR,
                f"Slack rejected message: {resp.get('error', 'unknown error')}",
            )
        return Ok(resp)
