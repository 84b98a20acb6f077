# sportsquiz/generation/credentials.py

import logging
import threading
from typing import Optional

from sportsquiz.ports.secret_resolver import SecretResolver, SecretResolutionError


logger = logging.getLogger(__name__)


class CredentialCache:
    """
    Fetch-once, cache-forever holder for the generation credential.

    Owned by the process (see dependencies.get_credential_cache) and injected
    into the generation service. A failed fetch is not cached, so the next
    request tries again; nothing retries inside a request.
    """

    def __init__(self, resolver: SecretResolver, secret_name: str):
        self._resolver = resolver
        self._secret_name = secret_name
        self._value: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def secret_name(self) -> str:
        return self._secret_name

    def get(self) -> Optional[str]:
        """Return the credential, or None when the resolver cannot produce it"""
        if self._value is not None:
            return self._value

        with self._lock:
            if self._value is None:
                try:
                    self._value = self._resolver.resolve(self._secret_name)
                    logger.info(f"Generation credential loaded: {self._secret_name}")
                except SecretResolutionError as e:
                    logger.error(f"Failed to resolve generation credential {self._secret_name}: {e}")
                    return None
        return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None

    def __repr__(self) -> str:
        state = "loaded" if self._value is not None else "empty"
        return f"<CredentialCache name={self._secret_name} {state}>"
