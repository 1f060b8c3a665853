"""
Transaction tokens used to correlate related log lines.
"""

from typing import Any


class TokenStore:
    """
    Current token plus saved tokens keyed by object identity.

    A token is saved under an object before nested work replaces it, and
    restored from the same object afterwards:

        store.token = "request-1"
        store.save(job)
        store.token = "job-7"
        ...
        store.restore(job)  # token is "request-1" again

    Restoring a key that was never saved clears the token.
    """

    def __init__(self, token: str | None = None):
        self.token = token
        self._saved: dict[int, str] | None = None

    def save(self, key: Any) -> None:
        """Remember the current token under key; no-op without a token."""
        if self.token is None or key is None:
            return
        if self._saved is None:
            self._saved = {}
        self._saved[id(key)] = self.token

    def restore(self, key: Any) -> None:
        """Make the token saved under key current again and forget it."""
        if key is None:
            return
        saved = self._saved or {}
        self.token = saved.pop(id(key), None)

    def __len__(self) -> int:
        return len(self._saved or {})

    def __repr__(self) -> str:
        return f"TokenStore(token={self.token!r}, saved={len(self)})"
