# =============================================================================
# lib/token_store.py - Session Token Storage
# =============================================================================
# Small key/value store for the signed-in user's access token.
#
# The legacy REST API authenticates with a bearer token that the auth flow
# saves under a fixed key ("r_to" by default). The store lives in memory and
# can optionally be mirrored to a JSON file so CLI runs survive restarts.
#
# Usage:
#   from lib.token_store import TokenStore
#   store = TokenStore.get_instance()
#   store.set_token("eyJ...")
#   token = store.get_token()
# =============================================================================

from __future__ import annotations

import json
import logging
from pathlib import Path

from app.config import settings

logger = logging.getLogger(__name__)


class TokenStore:
    """
    In-memory key/value store, optionally persisted to a JSON file.

    Example:
        store = TokenStore(path="/tmp/relif-tokens.json")
        store.set_token("eyJ...")
        store.get_token()   # "eyJ..."
        store.clear_token()
    """

    _instance: TokenStore | None = None

    def __init__(self, path: str | Path | None = None, token_key: str | None = None):
        self.path = Path(path) if path else None
        self.token_key = token_key or settings.TOKEN_STORAGE_KEY
        self._values: dict[str, str] = self._load()

    @classmethod
    def get_instance(cls) -> TokenStore:
        """Get or create the process-wide store (configured from settings)."""
        if cls._instance is None:
            cls._instance = cls(path=settings.TOKEN_STORE_PATH)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide store. Used by tests."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Generic key/value access
    # -------------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()

    # -------------------------------------------------------------------------
    # Access token shortcuts
    # -------------------------------------------------------------------------

    def get_token(self) -> str | None:
        return self.get(self.token_key)

    def set_token(self, token: str) -> None:
        self.set(self.token_key, token)

    def clear_token(self) -> None:
        self.remove(self.token_key)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable token store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values), encoding="utf-8")
