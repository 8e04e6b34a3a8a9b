"""
Selection Store: 현재 선택된 원본 파일.

- 한 번에 하나만 보관, 새 선택 시 통째로 교체
- 네트워크/I/O 부수효과 없음
- 파일 형식(PDF) 제약은 호스트의 파일 선택기 책임
"""

from src.domain.schemas import SourceFile


class SelectionStore:
    """선택된 SourceFile 보관소."""

    def __init__(self) -> None:
        self._current: SourceFile | None = None

    @property
    def current(self) -> SourceFile | None:
        return self._current

    @property
    def has_file(self) -> bool:
        return self._current is not None

    def select(self, file: SourceFile) -> None:
        """이전 선택을 버리고 새 파일로 교체."""
        self._current = file

    def clear(self) -> None:
        self._current = None
