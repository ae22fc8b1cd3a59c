"""입출력 유틸리티.

하위 모듈:
- output: 비활성 로드밸런서 보고서 (CSV 텍스트, CSV 파일, rich Table)
"""

from . import output

__all__: list[str] = ["output"]
