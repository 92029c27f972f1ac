"""
SCUM Feed - Webhook Notifier
Delivers embeds to the Discord webhook of a Source
"""

import logging
from typing import Optional

import aiohttp
import discord

from ..errors import DispatchError
from ..models.source import SinkChannel

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """
    Sends embeds through Discord webhooks
    - One shared aiohttp session for every webhook
    - Failures raise DispatchError; the caller decides what to do with them
    """

    def __init__(self, username: Optional[str] = None, avatar_url: Optional[str] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.username = username
        self.avatar_url = avatar_url
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def send(self, channel: SinkChannel, embed: discord.Embed):
        webhook = discord.Webhook.partial(channel.webhook_id, channel.token, session=self._get_session())

        kwargs = {'embed': embed}
        if self.username:
            kwargs['username'] = self.username
        if self.avatar_url:
            kwargs['avatar_url'] = self.avatar_url

        try:
            await webhook.send(**kwargs)
        except discord.HTTPException as e:
            raise DispatchError(f"Webhook {channel.webhook_id} rejected message ({e.status}): {e.text}") from e
        except aiohttp.ClientError as e:
            raise DispatchError(f"Webhook {channel.webhook_id} unreachable: {e}") from e

    async def close(self):
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("Closed webhook session")
