"""
test_selection.py - SelectionStore 테스트
"""

from src.core.selection import SelectionStore
from src.domain.schemas import SourceFile


class TestSelectionStore:
    """SelectionStore 테스트."""

    def test_starts_empty(self):
        store = SelectionStore()

        assert store.current is None
        assert store.has_file is False

    def test_select_stores_file(self, sample_pdf):
        store = SelectionStore()

        store.select(sample_pdf)

        assert store.current is sample_pdf
        assert store.has_file is True

    def test_select_replaces_previous(self, sample_pdf):
        """새 선택은 이전 파일을 통째로 교체."""
        store = SelectionStore()
        other = SourceFile(content=b"%PDF-1.7", filename="receipt.pdf")

        store.select(sample_pdf)
        store.select(other)

        assert store.current is other

    def test_reselect_same_file(self, sample_pdf):
        """같은 파일 재선택도 유효."""
        store = SelectionStore()

        store.select(sample_pdf)
        store.select(sample_pdf)

        assert store.current is sample_pdf

    def test_clear(self, sample_pdf):
        store = SelectionStore()
        store.select(sample_pdf)

        store.clear()

        assert store.current is None
        assert store.has_file is False
