"""
LLM Gateway Port (Interface)

퀴즈 생성에 쓰이는 생성형 텍스트 서비스를 추상화한다.
응답은 신뢰할 수 없는 자유 형식 텍스트이며, 구조 검증은 호출 측의 책임이다.
"""
from abc import ABC, abstractmethod
from typing import Optional


class LLMGateway(ABC):
    """
    LLM 호출 추상화 인터페이스

    구현체:
        - UpstageLLMGateway: Upstage Solar API
        - 테스트용 가짜 게이트웨이 (tests/conftest.py)

    Example:
        llm = UpstageLLMGateway(api_key="...")
        text = llm.invoke("Generate exactly 3 True/False questions ...")
    """

    @abstractmethod
    def invoke(self, prompt: str, temperature: Optional[float] = None) -> str:
        """
        프롬프트 전송 후 응답 텍스트 반환 (단일 best-effort 호출, 재시도 없음)

        Args:
            prompt: 생성 지시문
            temperature: 생성 온도 (None이면 기본값)

        Returns:
            str: 응답 텍스트 (비어 있을 수 있음)

        Raises:
            LLMAPIError: API 호출 실패
            LLMTimeoutError: 타임아웃
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """현재 사용 중인 모델 이름 (예: "solar-pro")"""
        pass


class LLMAPIError(Exception):
    """LLM API 호출 실패"""
    pass


class LLMTimeoutError(Exception):
    """LLM API 타임아웃"""
    pass
