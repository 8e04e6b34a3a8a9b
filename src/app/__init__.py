"""
App layer: UI 서버 (FastAPI + HTMX) + 템플릿 서비스 클라이언트.

역할:
- 파일 선택, 템플릿 업로드, placeholder 입력, 생성/다운로드 화면
- 외부 템플릿 서비스 호출 (providers)
- 워크플로 상태 머신 (services.workflow)

주의: PDF 파싱/렌더링은 외부 서비스 책임
"""
