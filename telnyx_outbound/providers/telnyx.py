# telnyx_outbound/providers/telnyx.py
"""
Telnyx Call Control Client

This module implements the CallControlClient interface for Telnyx.
It uses Telnyx's V2 Call Control API to dial numbers and SIP URIs.
"""

import asyncio
import json
from typing import Any

import aiohttp
from loguru import logger

from ..config import TelnyxOptions
from ..protocol import CallControlApiError, CallControlClient, DialRequest


class TelnyxClient(CallControlClient):
    """
    Client implementation for Telnyx.

    Sends call commands to the Telnyx V2 Call Control API over HTTPS.
    """

    def __init__(self, options: TelnyxOptions):
        """
        Initialize the Telnyx client.

        Args:
            options: Process-wide Telnyx options providing 'api_key' and 'api_url'.
        """
        self.api_key = options.api_key
        self.api_url = options.api_url.rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def dial(self, request: DialRequest) -> dict[str, Any]:
        """
        Dial a number or SIP URI via the Telnyx Call Control API.

        Args:
            request: The dial command.

        Returns:
            dict: The `data` object of the Telnyx response.

        Raises:
            CallControlApiError: On an HTTP error status or a transport failure.
        """
        url = f"{self.api_url}/calls"
        logger.debug(f"POST {url} for connection {request.connection_id}")
        try:
            async with (
                aiohttp.ClientSession() as http_session,
                http_session.post(url, headers=self.headers, json=request.to_payload()) as resp,
            ):
                if resp.status >= 400:
                    content = await resp.text()
                    raise CallControlApiError(
                        f"Telnyx responded with status {resp.status}",
                        status=resp.status,
                        content=content or None,
                    )
                status = resp.status
                result = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CallControlApiError(f"Telnyx request failed: {e!r}") from e

        if not isinstance(result, dict):
            raise CallControlApiError(
                "Telnyx returned an unexpected response body",
                status=status,
                content=json.dumps(result),
            )
        return result.get("data", result)
