"""
Core layer: 워크플로 구성 요소.

역할:
- 파일 선택 보관, placeholder 값 편집/검증
- 작업 단위 run log, ID 발급
"""

from .fields import FieldMap
from .ids import generate_run_id, generate_session_id
from .logging import complete_run_log, create_run_log, emit_warning, save_run_log
from .selection import SelectionStore
from .storage import atomic_write_json

__all__ = [
    # selection
    "SelectionStore",
    # fields
    "FieldMap",
    # ids
    "generate_run_id",
    "generate_session_id",
    # logging
    "create_run_log",
    "complete_run_log",
    "emit_warning",
    "save_run_log",
    # storage
    "atomic_write_json",
]
