"""
Slack Web API gateway.

Every call returns a GatewayResult instead of raising. Nothing is retried here.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from dealbell.domain.closed_won import Channel
from dealbell.domain.gateway_result import GatewayResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api/"
CHANNEL_PAGE_SIZE = 200


class SlackAPIError(Exception):
    """Slack answered with ok=false or an unusable body."""


class SlackGateway:
    """Thin async client over the four Slack methods the pipeline needs."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not token:
            raise ValueError("Missing Slack token")
        self._token = token
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _call(
        self,
        method: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Perform one Slack API call and return the decoded body.

        Raises:
            SlackAPIError: if the body is not an object or reports ok=false
            httpx.HTTPError: on transport or HTTP status errors
            ValueError: if the body is not JSON
        """
        async with self._client() as client:
            if payload is None:
                response = await client.request("GET", method, params=params)
            else:
                response = await client.request("POST", method, json=payload)

        response.raise_for_status()
        data = response.json()

        if not isinstance(data, dict):
            raise SlackAPIError(f"Error {action}: unexpected response body")
        if not data.get("ok"):
            raise SlackAPIError(f"Error {action}: {data.get('error', 'unknown_error')}")
        return data

    async def _guard(self, action: str, coro) -> GatewayResult:
        try:
            return GatewayResult.success(await coro)
        except (SlackAPIError, httpx.HTTPError, KeyError, ValueError) as e:
            message = str(e) or e.__class__.__name__
            if not isinstance(e, SlackAPIError):
                message = f"Error {action}: {message}"
            logger.debug(message)
            return GatewayResult.failure(message)

    async def list_channels(self) -> GatewayResult[List[Channel]]:
        """
        List all non-archived channels in the workspace.

        Follows response_metadata.next_cursor until Slack reports no further page.
        """

        async def _list() -> List[Channel]:
            channels: List[Channel] = []
            cursor = None
            while True:
                params: Dict[str, Any] = {"exclude_archived": "true", "limit": CHANNEL_PAGE_SIZE}
                if cursor:
                    params["cursor"] = cursor
                data = await self._call("conversations.list", "listing channels", params=params)

                for c in data.get("channels") or []:
                    if isinstance(c, dict) and isinstance(c.get("name"), str) and c.get("id"):
                        channels.append(Channel(name=c["name"], id=c["id"]))

                metadata = data.get("response_metadata")
                cursor = metadata.get("next_cursor") if isinstance(metadata, dict) else None
                if not cursor:
                    return channels

        return await self._guard("listing channels", _list())

    async def create_channel(self, name: str) -> GatewayResult[Channel]:
        """Create a channel with exactly this name."""

        async def _create() -> Channel:
            data = await self._call(
                "conversations.create", "creating channel", payload={"name": name}
            )
            channel = data.get("channel")
            if not isinstance(channel, dict):
                raise SlackAPIError("Error creating channel: no channel in response")
            return Channel(name=channel.get("name", name), id=channel["id"])

        return await self._guard("creating channel", _create())

    async def get_channel_messages(
        self, channel_id: str, limit: int = 10
    ) -> GatewayResult[List[Dict[str, Any]]]:
        """Fetch recent messages, most recent first."""

        async def _history() -> List[Dict[str, Any]]:
            data = await self._call(
                "conversations.history",
                "retrieving messages",
                params={"channel": channel_id, "limit": limit},
            )
            messages = data.get("messages")
            return messages if isinstance(messages, list) else []

        return await self._guard("retrieving messages", _history())

    async def send_message_to_channel(self, channel: str, text: str) -> GatewayResult[bool]:
        """Post a text message to a channel (name or id)."""

        async def _post() -> bool:
            await self._call(
                "chat.postMessage",
                "sending message",
                payload={"channel": channel, "text": text},
            )
            return True

        return await self._guard("sending message", _post())
