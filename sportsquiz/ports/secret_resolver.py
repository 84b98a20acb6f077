"""
Secret Resolver Port (Interface)

이름으로 API 크리덴셜을 조회한다. 캐싱은 generation.credentials.CredentialCache 담당.
"""
from abc import ABC, abstractmethod


class SecretResolver(ABC):
    """
    크리덴셜 조회 인터페이스

    구현체:
        - SettingsSecretResolver: pydantic-settings (.env / 환경변수 / secrets dir)
    """

    @abstractmethod
    def resolve(self, name: str) -> str:
        """
        Args:
            name: 시크릿 이름 (예: "UPSTAGE_API_KEY")

        Returns:
            str: 시크릿 값

        Raises:
            SecretResolutionError: 조회 실패 또는 값이 비어 있을 때
        """
        pass


class SecretResolutionError(Exception):
    """시크릿 조회 실패"""
    pass
