"""
Field Map: placeholder 이름 → 사용자 입력값.

불변 조건:
- 키 집합 == TemplateSession.placeholders (항상)
- 생성 시 모든 값은 빈 문자열
- 새 세션이 생기면 병합 없이 통째로 교체 (이전 값 이월 없음)
"""

from collections.abc import Iterable, Iterator

from src.domain.errors import ErrorCodes, WorkflowError


class FieldMap:
    """
    placeholder 값 편집기.

    Usage:
        fields = FieldMap.from_placeholders(["name", "amount"])
        fields.set("name", "Alice")
        fields.is_complete()  # False (amount 비어 있음)
    """

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    @classmethod
    def from_placeholders(cls, placeholders: Iterable[str]) -> "FieldMap":
        """placeholder 순서대로 빈 문자열 항목 생성."""
        return cls({name: "" for name in placeholders})

    def set(self, name: str, value: str) -> None:
        """
        기존 키의 값만 변경.

        Raises:
            WorkflowError: UNKNOWN_PLACEHOLDER (현재 템플릿에 없는 이름)
        """
        if name not in self._values:
            raise WorkflowError(
                ErrorCodes.UNKNOWN_PLACEHOLDER,
                name=name,
                known=list(self._values),
            )
        self._values[name] = value

    def get(self, name: str) -> str:
        return self._values.get(name, "")

    def is_complete(self) -> bool:
        """모든 값이 비어 있지 않은 문자열이면 True (빈 맵 포함)."""
        return all(isinstance(v, str) and v != "" for v in self._values.values())

    def missing(self) -> list[str]:
        """아직 비어 있는 키 (placeholder 순서)."""
        return [name for name, value in self._values.items() if not value]

    def keys(self) -> list[str]:
        return list(self._values)

    def items(self) -> list[tuple[str, str]]:
        return list(self._values.items())

    def to_dict(self) -> dict[str, str]:
        """독립 사본 (generate payload용)."""
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FieldMap({self._values!r})"
