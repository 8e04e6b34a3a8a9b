"""
Template Service Provider Abstraction.

외부 템플릿 처리 서비스는 교체 가능하게 설계.
서비스 주소/타임아웃은 config만 SSOT.
"""

from .base import ProviderError, TemplateServiceProvider
from .decode import decode_generate_response, decode_upload_response, normalize_placeholders
from .http import HttpTemplateService

__all__ = [
    "TemplateServiceProvider",
    "ProviderError",
    "HttpTemplateService",
    "decode_upload_response",
    "decode_generate_response",
    "normalize_placeholders",
]
