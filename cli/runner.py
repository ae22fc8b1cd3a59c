"""
cli/runner.py - 스윕 실행 및 보고

CI/CD 파이프라인과 cron 실행을 위한 비대화형 실행기입니다.
스윕을 실행하고 형식에 맞게 보고서를 출력한 뒤 종료 코드를 반환합니다.

종료 코드:
    0: 정상 (삭제 모드에서는 개별 삭제 실패와 무관)
    1: 계정 또는 (리전, 종류) 범위 실패
    130: 사용자 취소 (Ctrl-C)

출력:
    - tabled: stdout에 rich Table
    - csv: stdout에 CSV 텍스트 (비활성 레코드가 있는 계정/종류별 블록)
    - file: outputs/{account_id}_inactive_{elb|elbv2}s.csv
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import click

from cli.ui.console import console, print_error, print_info, print_success, print_table, print_warning
from core.auth.session import CredentialBroker
from core.config import ListFormat, RunOption
from plugins.elb.sweep import SweepConfig, SweepOrchestrator, SweepReport
from shared.io.output.report import format_csv, render_outcomes, render_table, write_account_csv

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """실행 설정"""

    sweep: SweepConfig
    format: ListFormat = ListFormat.FILE
    output_dir: str | None = None
    profile: str | None = None


class SweepRunner:
    """스윕 실행기

    대화형 프롬프트 없이 스윕을 실행하고 보고서를 출력합니다.
    """

    def __init__(self, config: RunnerConfig, broker: CredentialBroker | None = None):
        self.config = config
        self.broker = broker or CredentialBroker(profile_name=config.profile)

    def run(self) -> int:
        """스윕 실행

        Returns:
            종료 코드 (0, 1, 130)
        """
        try:
            report = SweepOrchestrator(self.config.sweep, self.broker).run()
            self._emit(report)
        except KeyboardInterrupt:
            console.print("\n[dim]취소되었습니다[/dim]")
            return 130

        if report.has_errors:
            for error in report.errors:
                print_error(str(error))
            print_warning(f"{len(report.errors)}개 범위에서 스캔이 실패했습니다")
            return 1
        return 0

    # =========================================================================
    # 보고
    # =========================================================================

    def _emit(self, report: SweepReport) -> None:
        if self.config.sweep.run_option is RunOption.DELETE:
            self._emit_deletions(report)
            return

        for account in report.accounts:
            if account.failed:
                continue
            for kind in self.config.sweep.kinds:
                records = account.inactive_records(kind)
                if self.config.format is ListFormat.TABLED:
                    print_table(render_table(records, kind, title=f"{account.account_id} inactive {kind}s"))
                elif self.config.format is ListFormat.CSV:
                    # 비활성 레코드가 없는 종류는 헤더도 출력하지 않음
                    if records:
                        click.echo(format_csv(records, kind), nl=False)
                else:
                    path = write_account_csv(account.account_id, records, kind, output_dir=self.config.output_dir)
                    print_success(f"{_display_path(path)} ({len(records)}건)")

    def _emit_deletions(self, report: SweepReport) -> None:
        outcomes = report.deletion_outcomes
        if not outcomes:
            print_info("삭제할 비활성 로드밸런서가 없습니다")
            return

        print_table(render_outcomes(outcomes))
        failed = sum(1 for o in outcomes if not o.succeeded)
        if failed:
            print_warning(f"삭제 실패 {failed}건 / 전체 {len(outcomes)}건")
        else:
            print_success(f"{len(outcomes)}개 로드밸런서 삭제 요청 완료")


def _display_path(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


def run_sweep(
    sweep: SweepConfig,
    list_format: ListFormat = ListFormat.FILE,
    output_dir: str | None = None,
    profile: str | None = None,
) -> int:
    """스윕 실행 편의 함수

    Returns:
        종료 코드
    """
    config = RunnerConfig(sweep=sweep, format=list_format, output_dir=output_dir, profile=profile)
    return SweepRunner(config).run()
