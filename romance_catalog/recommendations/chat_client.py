"""
Chat-completion client for the generative-text gateway.
"""

import logging
from typing import Optional

import aiohttp


class ChatCompletionError(Exception):
    """Non-200 response or an empty completion"""


class ChatCompletionClient:
    """
    Minimal OpenAI-compatible chat-completion client built on aiohttp.

    Only the first choice's message content is consumed.
    """

    def __init__(self, api_url: str, api_key: Optional[str], model: str, timeout: int = 30):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def open_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            connector=aiohttp.TCPConnector(limit=20),
        )

    async def complete(
        self,
        session: aiohttp.ClientSession,
        system: str,
        user: str,
        max_tokens: int = 100,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with session.post(self.api_url, json=payload, headers=headers) as response:
            if response.status != 200:
                raise ChatCompletionError(f"AI API returned {response.status}")
            data = await response.json()

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not content or not content.strip():
            raise ChatCompletionError("AI API returned an empty completion")
        return content.strip()
