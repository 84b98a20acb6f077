"""
Upstage LLM Gateway Implementation

Upstage Solar API를 사용한 LLMGateway 구현체.
퀴즈 생성 경로는 재시도 없이 한 번만 호출한다 (실패 시 사용자가 수동 재시도).
"""
import logging
from typing import Optional

import openai
from langchain_upstage import ChatUpstage
from langsmith import traceable

from sportsquiz.ports.llm_gateway import LLMGateway, LLMAPIError, LLMTimeoutError


logger = logging.getLogger(__name__)


class UpstageLLMGateway(LLMGateway):
    """
    Upstage Solar API를 사용한 LLM Gateway

    Example:
        gateway = UpstageLLMGateway(api_key="...", model="solar-pro")
        text = gateway.invoke("Generate exactly 5 multiple-choice questions ...")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "solar-pro",
        timeout: int = 30,
        temperature: float = 0.7
    ):
        """
        Args:
            api_key: Upstage API 키 (CredentialCache에서 전달)
            model: 모델 이름 (solar-pro, solar-mini 등)
            timeout: API 호출 타임아웃 (초)
            temperature: 기본 생성 온도
        """
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._temperature = temperature

        try:
            self._llm = self._build_client(temperature)
            logger.info(f"UpstageLLMGateway initialized: model={model}, timeout={timeout}s")
        except Exception as e:
            logger.error(f"Failed to initialize Upstage LLM: {e}")
            raise LLMAPIError(f"LLM initialization failed: {e}") from e

    def _build_client(self, temperature: float) -> ChatUpstage:
        return ChatUpstage(
            api_key=self._api_key,
            model=self._model,
            timeout=self._timeout,
            temperature=temperature
        )

    @traceable(name="quiz_generation_llm_call", run_type="llm")
    def invoke(self, prompt: str, temperature: Optional[float] = None) -> str:
        """
        LLM 호출 (단일 시도)

        Returns:
            str: 응답 텍스트 (공백 제거, 비어 있을 수 있음)

        Raises:
            LLMAPIError: API 호출 실패
            LLMTimeoutError: 타임아웃
        """
        try:
            logger.debug(f"Invoking LLM: prompt_length={len(prompt)}, temperature={temperature}")

            if temperature is not None and temperature != self._temperature:
                llm = self._build_client(temperature)
            else:
                llm = self._llm
            response = llm.invoke(prompt)

        except (TimeoutError, openai.APITimeoutError) as e:
            logger.error(f"LLM timeout: {e}")
            raise LLMTimeoutError(f"LLM call timed out after {self._timeout}s") from e

        except Exception as e:
            logger.error(f"LLM API error: {e}")
            raise LLMAPIError(f"LLM call failed: {e}") from e

        content = response.content
        if not isinstance(content, str):
            # 멀티파트 응답은 텍스트 조각만 이어 붙인다
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content or []
            )
        content = content.strip()
        logger.info(f"LLM response received: length={len(content)}")
        return content

    def get_model_name(self) -> str:
        """현재 모델 이름 반환"""
        return self._model

    def __repr__(self) -> str:
        return f"<UpstageLLMGateway model={self._model}>"
