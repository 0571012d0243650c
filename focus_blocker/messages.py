import os
import datetime
import logging
import threading
from typing import Callable

import requests
from dotenv import load_dotenv

from .config import (
    DEFAULT_MESSAGE,
    DEFAULT_MODEL,
    ENV_FILE,
    GEMINI_API_KEY_ENV,
    GEMINI_ENDPOINT,
    MESSAGE_TIMEOUT_SEC,
)


class MessageProviderError(Exception):
    pass


def load_api_key(env_file: str = ENV_FILE) -> str | None:
    """Read the Gemini key from the environment, falling back to a .env file."""
    key = os.getenv(GEMINI_API_KEY_ENV)
    if key:
        return key.strip()
    if os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()
    key = os.getenv(GEMINI_API_KEY_ENV)
    return key.strip() if key else None


def build_prompt(app_name: str, personality: str, now: datetime.datetime) -> str:
    tone = personality.strip() or "friendly but firm"
    return f"""You are a productivity assistant who is {tone}.

The application "{app_name}" was just closed at {now.strftime("%H:%M")} because it is productive time.

Write a short motivational message (2-3 sentences at most) that:
1. Reminds the user why staying focused matters
2. Gives one concrete thing they can do right now

Reply with the message only, no formatting or extra explanation."""


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = MESSAGE_TIMEOUT_SEC,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        # Dispatch threads may call concurrently; each call gets its own session
        self._session_factory = session_factory

    def fetch_message(self, app_name: str, personality: str = "") -> str:
        payload = {
            "contents": [
                {"parts": [{"text": build_prompt(app_name, personality, datetime.datetime.now())}]}
            ]
        }
        try:
            with self._session_factory() as session:
                resp = session.post(
                    GEMINI_ENDPOINT.format(model=self._model),
                    params={"key": self._api_key},
                    json=payload,
                    timeout=self._timeout,
                )
        except requests.RequestException as e:
            raise MessageProviderError(f"failed to send request: {e}") from e

        if resp.status_code != 200:
            raise MessageProviderError(f"API error (status {resp.status_code}): {resp.text[:200]}")

        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MessageProviderError("no content in response") from e

        text = str(text).strip()
        if not text:
            raise MessageProviderError("empty message")
        return text


class MotivationSource:
    """Wraps a client with a last-good-message cache and a fixed default."""

    def __init__(self, client, logger: logging.Logger, default_message: str = DEFAULT_MESSAGE):
        self._client = client
        self._logger = logger
        self._default = default_message
        self._lock = threading.Lock()
        self._last_message: str | None = None

    @property
    def default_message(self) -> str:
        return self._default

    @property
    def last_message(self) -> str | None:
        with self._lock:
            return self._last_message

    def fallback(self) -> str:
        with self._lock:
            return self._last_message or self._default

    def get(self, app_name: str, personality: str = "") -> str:
        if self._client is None:
            return self._default
        try:
            message = self._client.fetch_message(app_name, personality)
        except Exception as e:
            self._logger.warning(f"Message provider failed, using fallback: {e}")
            return self.fallback()

        with self._lock:
            self._last_message = message
        return message
