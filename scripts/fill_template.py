#!/usr/bin/env python3
"""
fill_template.py - PDF 템플릿 채우기 (헤드리스)

웹 화면과 같은 WorkflowController로 전체 흐름을 실행:
1. PDF 선택 → 업로드 → placeholder 목록 출력
2. --set 값 적용 (템플릿에 없는 이름은 경고 후 무시)
3. 빈 값은 입력 받기 (--non-interactive면 실패)
4. 생성 → 다운로드 참조 출력

사용법:
    # 값 전부 지정
    uv run python scripts/fill_template.py --pdf invoice.pdf --set name=Alice --set amount=100

    # 서비스 주소 지정
    uv run python scripts/fill_template.py --pdf invoice.pdf --service-url http://localhost:5001
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv  # noqa: E402

from src.app.main import load_config, service_settings  # noqa: E402
from src.app.providers.base import TemplateServiceProvider  # noqa: E402
from src.app.providers.http import HttpTemplateService  # noqa: E402
from src.app.services.workflow import WorkflowController  # noqa: E402
from src.domain.constants import is_pdf  # noqa: E402
from src.domain.schemas import SourceFile  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_assignments(values: list[str]) -> dict[str, str]:
    """
    NAME=VALUE 목록 파싱.

    Raises:
        ValueError: '=' 없는 항목
    """
    assignments: dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise ValueError(f"Invalid --set value (expected NAME=VALUE): {item}")
        name, value = item.split("=", 1)
        assignments[name.strip()] = value
    return assignments


async def run_workflow(
    pdf_path: Path,
    assignments: dict[str, str],
    provider: TemplateServiceProvider,
    prompt: Callable[[str], str] | None = None,
    upload_timeout: float | None = None,
    generate_timeout: float | None = None,
) -> str | None:
    """
    전체 흐름 실행.

    Args:
        pdf_path: 템플릿 PDF 경로
        assignments: placeholder 값
        provider: 템플릿 서비스 Provider
        prompt: 빈 값 입력 함수 (None이면 비대화형). 워커 스레드에서 호출
        upload_timeout: 업로드 타임아웃(초)
        generate_timeout: 생성 타임아웃(초)

    Returns:
        다운로드 참조 (실패 시 None)
    """
    controller = WorkflowController(
        provider,
        upload_timeout=upload_timeout,
        generate_timeout=generate_timeout,
    )

    controller.select_file(SourceFile.from_path(pdf_path))

    session = await controller.upload()
    if session is None:
        error = controller.status.error
        logger.error(error.message if error else "Upload failed")
        return None

    print(f"Placeholders ({len(session.placeholders)}): {', '.join(session.placeholders) or '-'}")

    for name, value in assignments.items():
        if name not in session.placeholders:
            logger.warning(f"Template has no placeholder '{name}'; skipped")
            continue
        controller.set_field(name, value)

    if prompt is not None:
        for name in controller.missing_fields():
            value = await asyncio.to_thread(prompt, f"{name}: ")
            controller.set_field(name, value)

    if not controller.can_generate:
        logger.error(f"Missing values: {', '.join(controller.missing_fields())}")
        return None

    result = await controller.generate()
    if result is None:
        error = controller.status.error
        logger.error(error.message if error else "Generation failed")
        return None

    return controller.consume_download()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="PDF 템플릿 채우기 (헤드리스)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--pdf",
        type=str,
        required=True,
        help="템플릿 PDF 경로",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="placeholder 값 (반복 가능)",
    )
    parser.add_argument(
        "--service-url",
        type=str,
        default=None,
        help="템플릿 서비스 주소 (기본: 환경변수/ default.yaml)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="빈 값 입력을 받지 않음",
    )

    args = parser.parse_args(argv)

    load_dotenv()

    pdf_path = Path(args.pdf)
    if not pdf_path.is_file():
        logger.error(f"File not found: {pdf_path}")
        return 1
    if not is_pdf(pdf_path.name):
        logger.error(f"Not a PDF file: {pdf_path}")
        return 1

    try:
        assignments = parse_assignments(args.assignments)
    except ValueError as e:
        logger.error(str(e))
        return 1

    config = load_config(Path(args.config) if args.config else None)
    settings = service_settings(config)

    async def _run() -> str | None:
        async with HttpTemplateService(
            base_url=args.service_url or settings["base_url"],
            upload_timeout=settings["upload_timeout"],
            generate_timeout=settings["generate_timeout"],
        ) as provider:
            return await run_workflow(
                pdf_path,
                assignments,
                provider,
                prompt=None if args.non_interactive else input,
                upload_timeout=settings["upload_timeout"],
                generate_timeout=settings["generate_timeout"],
            )

    download_path = asyncio.run(_run())
    if download_path is None:
        return 1

    print(f"Download: {download_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
