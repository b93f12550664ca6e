import logging
import re
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class TransportError(Exception):
    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Request failed: {body}")
        else:
            super().__init__(f"HTTP {status_code}: {body}")


_LINE_BREAK = re.compile(r"\r\n|\r|\n")
# Only ASCII control characters and space are trimmed; Unicode whitespace is content.
_TRIM = "".join(map(chr, range(33)))


def read_body(response: httpx.Response) -> str:
    text = response.content.decode("utf-8", errors="replace")
    return "".join(line.strip(_TRIM) for line in _LINE_BREAK.split(text))


class ChatTransport:
    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = api_url
        self._api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _client(self) -> httpx.Client:
        # None disables httpx timeouts entirely; the call blocks like a plain socket.
        return httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport)

    def post(self, body: str) -> str:
        payload = body.encode("utf-8")
        logger.debug("POST %s (%d bytes)", self.api_url, len(payload))
        try:
            with self._client() as client:
                response = client.post(self.api_url, content=payload, headers=self._headers())
                text = read_body(response)
        except httpx.HTTPError as e:
            raise TransportError(None, str(e)) from e

        logger.debug("Response status=%d (%d chars)", response.status_code, len(text))
        if response.status_code != 200:
            raise TransportError(response.status_code, text)
        return text
