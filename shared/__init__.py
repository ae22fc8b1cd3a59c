"""공유 유틸리티 - plugins와 cli에서 공통 사용.

이 패키지는 다음 두 가지 카테고리의 공유 유틸리티를 제공합니다:

- aws: AWS 관련 유틸리티 (CloudWatch 메트릭)
- io: 입출력 유틸리티 (CSV/테이블 보고서)

의존성 구조:
    core (인프라)
       ↑
    shared (공유 유틸리티)
       ↑
    plugins / cli
"""

from . import aws, io

__all__ = ["aws", "io"]
