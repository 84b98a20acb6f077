"""
Settings-backed Secret Resolver

pydantic-settings가 읽어 둔 값(.env, 환경변수)에서 시크릿을 찾는다.
"UPSTAGE_API_KEY" → Settings.upstage_api_key
"""
import logging

from sportsquiz.config import Settings, get_settings
from sportsquiz.ports.secret_resolver import SecretResolver, SecretResolutionError


logger = logging.getLogger(__name__)


class SettingsSecretResolver(SecretResolver):
    """Resolve secrets by name from the application Settings"""

    def __init__(self, settings: Settings = None):
        self._settings = settings or get_settings()

    def resolve(self, name: str) -> str:
        field_name = name.strip().lower()
        if field_name not in type(self._settings).model_fields:
            raise SecretResolutionError(f"Unknown secret: {name}")

        value = getattr(self._settings, field_name)
        if not isinstance(value, str) or not value.strip():
            raise SecretResolutionError(f"Secret {name} is not configured")

        logger.debug(f"Secret resolved: {name}")
        return value.strip()
