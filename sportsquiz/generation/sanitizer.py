"""
LLM 응답 정리 (best-effort)

코드펜스(```json ... ```)와 앞뒤 잡담을 걷어내서 JSON 파싱 가능성을 높인다.
결과가 여전히 파싱되지 않을 수 있으며, 그 경우는 SchemaValidator가 처리한다.
"""
import re

_FENCE = "```"
# Opening fence with an optional language tag ("```json")
_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\r?\n?([\s\S]*?)```")


def _strip_leading_fence(text: str) -> str:
    return _OPENING_FENCE.sub("", text, count=1)


def sanitize_model_output(raw_text: str) -> str:
    """
    Args:
        raw_text: LLM 원본 응답

    Returns:
        str: 정리된 텍스트

    Example:
        >>> sanitize_model_output('```json\\n[{"question": "x"}]\\n```')
        '[{"question": "x"}]'
    """
    if not raw_text:
        return ""

    text = raw_text.strip()

    if text.startswith(_FENCE):
        text = _strip_leading_fence(text)
        text = text.rstrip()
        if text.endswith(_FENCE):
            text = text[:-len(_FENCE)]
        return text.strip()

    if text.startswith("[") or text.startswith("{"):
        return text

    # 앞쪽 잡담 + 코드블록
    fenced = _FENCED_BLOCK.search(text)
    if fenced and fenced.group(1).strip():
        return fenced.group(1).strip()

    # 앞뒤 잡담 + 맨 JSON 배열
    array_start = text.find("[")
    array_end = text.rfind("]")
    if 0 <= array_start < array_end:
        return text[array_start:array_end + 1].strip()

    return text
