"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    lbsweep --version                       # 버전 표시
    lbsweep run -c sweep.yaml               # 설정 문서 기반 (계정별 역할 위임)
    lbsweep scan --regions us-east-1        # 현재 자격 증명으로 단일 계정 스캔

    예시:
    lbsweep run -c sweep.yaml -f csv
    lbsweep scan --regions us-east-1,eu-west-1 --vpc-ids vpc-0abc --kind elbv2
    lbsweep scan --regions us-east-1 --option delete -p prod

종료 코드:
    0: 정상
    1: 설정 오류 또는 스캔 범위 실패
    2: 잘못된 옵션 (click 사용법 오류)
    130: 사용자 취소

Usage:
    $ lbsweep run -c sweep.yaml
    $ python -m cli.app scan --regions us-east-1
"""

import logging

import click

from cli.runner import run_sweep
from cli.ui.console import configure_logging, print_error
from core.auth.session import AccountTarget
from core.config import ListFormat, RunOption, get_version, load_app_config, settings
from core.exceptions import ConfigError, format_error_for_user
from plugins.elb.common import LBKind
from plugins.elb.sweep import ALL_KINDS, SweepConfig

logger = logging.getLogger(__name__)

VERSION = get_version()

FORMAT_CHOICES = ["tabled", "table", "csv", "file"]
KIND_CHOICES = ["elb", "elbv2", "all"]


def _split_csv(value: str | None) -> list[str]:
    """쉼표 구분 문자열을 목록으로 ("a, b,,c" → ["a", "b", "c"])"""
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _kinds_from(value: str) -> tuple[LBKind, ...]:
    if value == "all":
        return ALL_KINDS
    return (LBKind.from_string(value),)


@click.group()
@click.version_option(VERSION, prog_name="lbsweep")
def cli() -> None:
    """lbsweep - 유휴 로드밸런서 탐지/삭제

    HealthyHostCount 메트릭으로 CLB/ALB/NLB의 활동 여부를 판정합니다.
    """


@cli.command("run")
@click.option(
    "-c",
    "--config",
    "config_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="YAML 설정 파일 경로 (TOML 설정은 YAML로 변환 필요)",
)
@click.option(
    "-f",
    "--format",
    "list_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default=None,
    help="출력 형식 (기본: 설정 파일의 format)",
)
@click.option(
    "--kind",
    type=click.Choice(KIND_CHOICES, case_sensitive=False),
    default="all",
    help="스캔할 LB 종류",
)
@click.option("-o", "--output-dir", default=None, help=f"CSV 파일 출력 디렉토리 (기본: {settings.OUTPUT_DIR})")
@click.option("-v", "--verbose", count=True, help="-v: INFO, -vv: DEBUG 로그")
def run_command(
    config_path: str,
    list_format: str | None,
    kind: str,
    output_dir: str | None,
    verbose: int,
) -> None:
    """설정 파일의 모든 계정 스윕

    \b
    Examples:
        lbsweep run -c sweep.yaml
        lbsweep run -c sweep.yaml -f csv --kind elb
    """
    configure_logging(verbose)

    try:
        app_config = load_app_config(config_path)
        fmt = ListFormat.from_string(list_format) if list_format else app_config.format
    except ConfigError as e:
        print_error(format_error_for_user(e))
        raise SystemExit(1) from e

    logger.info(f"설정 로드: {app_config.name} ({len(app_config.accounts)}개 계정)")
    sweep = SweepConfig.from_app_config(app_config, kinds=_kinds_from(kind.lower()))
    raise SystemExit(run_sweep(sweep, fmt, output_dir=output_dir))


@cli.command("scan")
@click.option("-r", "--regions", required=True, help="리전 목록 (쉼표 구분)")
@click.option("--vpc-ids", default="", help="VPC 필터 (쉼표 구분, 기본: 전체)")
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=settings.DEFAULT_LOOKBACK_DAYS,
    show_default=True,
    help="메트릭 조회 기간 (일)",
)
@click.option(
    "--option",
    "run_option",
    type=click.Choice(["list", "delete"], case_sensitive=False),
    default="list",
    show_default=True,
    help="list: 보고만, delete: 비활성 LB 삭제",
)
@click.option(
    "-f",
    "--format",
    "list_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="tabled",
    show_default=True,
    help="출력 형식",
)
@click.option(
    "--kind",
    type=click.Choice(KIND_CHOICES, case_sensitive=False),
    default="all",
    show_default=True,
    help="스캔할 LB 종류",
)
@click.option("-p", "--profile", default=None, help="AWS 프로파일 (기본: 기본 자격 증명 체인)")
@click.option("--role-arn", default=None, help="위임할 역할 ARN (선택)")
@click.option("--lenient-vpc-filter", is_flag=True, help="VPC 필터 밖 LB도 결과에 포함")
@click.option("-o", "--output-dir", default=None, help=f"CSV 파일 출력 디렉토리 (기본: {settings.OUTPUT_DIR})")
@click.option("-v", "--verbose", count=True, help="-v: INFO, -vv: DEBUG 로그")
def scan_command(
    regions: str,
    vpc_ids: str,
    days: int,
    run_option: str,
    list_format: str,
    kind: str,
    profile: str | None,
    role_arn: str | None,
    lenient_vpc_filter: bool,
    output_dir: str | None,
    verbose: int,
) -> None:
    """현재 자격 증명으로 단일 계정 스캔

    \b
    Examples:
        lbsweep scan --regions us-east-1
        lbsweep scan --regions us-east-1,eu-west-1 --vpc-ids vpc-0abc -f csv
        lbsweep scan --regions us-east-1 --option delete -p prod
    """
    configure_logging(verbose)

    region_list = _split_csv(regions)
    if not region_list:
        raise click.BadParameter("최소 1개 리전이 필요합니다", param_hint="--regions")

    target = AccountTarget(
        role_arn=role_arn,
        regions=region_list,
        vpc_ids=_split_csv(vpc_ids),
        profile_name=profile,
    )
    sweep = SweepConfig(
        run_option=RunOption.from_string(run_option),
        days=days,
        targets=[target],
        kinds=_kinds_from(kind.lower()),
        strict_vpc_filter=not lenient_vpc_filter,
    )
    raise SystemExit(run_sweep(sweep, ListFormat.from_string(list_format), output_dir=output_dir, profile=profile))


if __name__ == "__main__":
    cli()
