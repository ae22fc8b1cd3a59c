"""
core/config.py - 중앙 설정 관리

런타임 기본값(Settings)과 스윕 설정 문서(YAML) 로딩을 담당합니다.

구성 요소:
    - Settings: 불변 기본값 (메트릭 파라미터, 풀 크기, 출력 경로 등)
    - RunOption / ListFormat: 실행 모드와 출력 형식
    - AccountConfig / AppConfig: 설정 문서의 타입 표현
    - load_app_config(): YAML 설정 파일 로드 및 검증

설정 파일 예시:
    name: nightly-sweep
    run_option: list
    days: 45
    aws:
      accounts:
        - iam_role: arn:aws:iam::111122223333:role/LbSweeper
          regions: [us-east-1]
          vpc_ids: [vpc-0abc]

Usage:
    from core.config import settings, load_app_config

    conf = load_app_config("config/sweep.yaml")
    print(settings.DEFAULT_LOOKBACK_DAYS)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ConfigError

VERSION = "0.3.0"


# =============================================================================
# 환경 변수 헬퍼
# =============================================================================


def get_env_int(name: str, default: int) -> int:
    """정수형 환경 변수 조회 (형식 오류 시 기본값)"""
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_version() -> str:
    """버전 문자열 반환"""
    return VERSION


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """런타임 기본값 (불변)

    풀 크기는 환경 변수로 재정의할 수 있습니다:
        LBSWEEP_CLASSIC_POOL_SIZE, LBSWEEP_V2_POOL_SIZE
    """

    DEFAULT_REGION: str = "ap-northeast-2"
    DEFAULT_LOOKBACK_DAYS: int = 45

    # CloudWatch 조회 파라미터
    METRIC_NAME: str = "HealthyHostCount"
    METRIC_PERIOD_SECONDS: int = 60
    METRIC_STAT: str = "Minimum"

    # 리전당 동시 분류 작업 수 (v2는 리소스당 쿼리가 많아 더 작게)
    CLASSIC_POOL_SIZE: int = field(default_factory=lambda: get_env_int("LBSWEEP_CLASSIC_POOL_SIZE", 20))
    V2_POOL_SIZE: int = field(default_factory=lambda: get_env_int("LBSWEEP_V2_POOL_SIZE", 10))

    # 역할 위임
    ROLE_SESSION_NAME: str = "lbsweep"
    SESSION_DURATION_SECONDS: int = 3600

    OUTPUT_DIR: str = "outputs"


settings = Settings()


# =============================================================================
# 실행 모드 / 출력 형식
# =============================================================================


class RunOption(Enum):
    """실행 모드"""

    LIST = "list"
    DELETE = "delete"

    @classmethod
    def from_string(cls, value: str) -> RunOption:
        """문자열에서 RunOption 변환 (대소문자 무시)

        Raises:
            ConfigError: 알 수 없는 값
        """
        normalized = (value or "").strip().lower()
        for option in cls:
            if option.value == normalized:
                return option
        raise ConfigError("run_option", f"알 수 없는 실행 모드 '{value}' (list | delete)")

    def __str__(self) -> str:
        return self.value


class ListFormat(Enum):
    """리포트 출력 형식"""

    TABLED = "tabled"
    CSV = "csv"
    FILE = "file"

    @classmethod
    def from_string(cls, value: str) -> ListFormat:
        """문자열에서 ListFormat 변환 ("table"은 "tabled"의 별칭)

        Raises:
            ConfigError: 알 수 없는 값
        """
        normalized = (value or "").strip().lower()
        if normalized == "table":
            normalized = "tabled"
        for fmt in cls:
            if fmt.value == normalized:
                return fmt
        raise ConfigError("format", f"알 수 없는 출력 형식 '{value}' (tabled | csv | file)")

    def __str__(self) -> str:
        return self.value


# =============================================================================
# 설정 문서
# =============================================================================


@dataclass
class AccountConfig:
    """계정별 스캔 대상

    Attributes:
        iam_role: 위임할 역할 ARN
        regions: 스캔할 리전 목록
        vpc_ids: VPC 필터 (비어 있으면 필터 없음)
    """

    iam_role: str
    regions: list[str]
    vpc_ids: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    """스윕 설정 문서"""

    name: str
    run_option: RunOption
    days: int
    accounts: list[AccountConfig]
    format: ListFormat = ListFormat.FILE
    strict_vpc_filter: bool = True


def _require(mapping: dict[str, Any], key: str, path: str) -> Any:
    if key not in mapping or mapping[key] is None:
        raise ConfigError(path, "필수 항목이 없습니다")
    return mapping[key]


def _string_list(value: Any, path: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(path, "문자열 목록이어야 합니다")
    return [v.strip() for v in value if v.strip()]


def _parse_account(raw: Any, index: int) -> AccountConfig:
    path = f"aws.accounts[{index}]"
    if not isinstance(raw, dict):
        raise ConfigError(path, "매핑이어야 합니다")

    iam_role = _require(raw, "iam_role", f"{path}.iam_role")
    if not isinstance(iam_role, str) or not iam_role.startswith("arn:"):
        raise ConfigError(f"{path}.iam_role", f"역할 ARN 형식이 아닙니다: {iam_role!r}")

    regions = _string_list(_require(raw, "regions", f"{path}.regions"), f"{path}.regions")
    if not regions:
        raise ConfigError(f"{path}.regions", "최소 1개 리전이 필요합니다")

    return AccountConfig(
        iam_role=iam_role,
        regions=regions,
        vpc_ids=_string_list(raw.get("vpc_ids"), f"{path}.vpc_ids"),
    )


def parse_app_config(data: Any) -> AppConfig:
    """파싱된 설정 문서를 AppConfig로 변환 및 검증

    Args:
        data: yaml.safe_load 결과

    Returns:
        AppConfig

    Raises:
        ConfigError: 구조나 값이 잘못된 경우
    """
    if not isinstance(data, dict):
        raise ConfigError("<root>", "설정 문서는 매핑이어야 합니다")

    days = data.get("days", settings.DEFAULT_LOOKBACK_DAYS)
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ConfigError("days", f"양의 정수여야 합니다: {days!r}")

    aws = _require(data, "aws", "aws")
    if not isinstance(aws, dict):
        raise ConfigError("aws", "매핑이어야 합니다")
    raw_accounts = _require(aws, "accounts", "aws.accounts")
    if not isinstance(raw_accounts, list) or not raw_accounts:
        raise ConfigError("aws.accounts", "최소 1개 계정이 필요합니다")

    strict = data.get("strict_vpc_filter", True)
    if not isinstance(strict, bool):
        raise ConfigError("strict_vpc_filter", "true 또는 false여야 합니다")

    return AppConfig(
        name=str(data.get("name", "lbsweep")),
        run_option=RunOption.from_string(str(_require(data, "run_option", "run_option"))),
        days=days,
        accounts=[_parse_account(raw, i) for i, raw in enumerate(raw_accounts)],
        format=ListFormat.from_string(str(data.get("format", ListFormat.FILE.value))),
        strict_vpc_filter=strict,
    )


def load_app_config(path: str | Path) -> AppConfig:
    """YAML 설정 파일 로드

    설정 문서는 YAML만 지원합니다. 이전의 TOML 설정(.toml)은 같은 키 구조
    (name, run_option, days, format, aws.accounts[].iam_role/regions/vpc_ids)의
    YAML로 옮겨야 하며, .toml 파일을 넘기면 변환 안내와 함께 ConfigError가 발생합니다.

    Args:
        path: 설정 파일 경로

    Returns:
        검증된 AppConfig

    Raises:
        ConfigError: 파일을 읽을 수 없거나 파싱/검증에 실패한 경우
    """
    config_path = Path(path)
    if config_path.suffix.lower() == ".toml":
        raise ConfigError(str(config_path), "TOML 설정은 지원하지 않습니다. 같은 키 구조의 YAML 파일로 변환하세요")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(config_path), "설정 파일을 읽을 수 없습니다", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(str(config_path), "YAML 파싱 실패", cause=e) from e

    return parse_app_config(data)
