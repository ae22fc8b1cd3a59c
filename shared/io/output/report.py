"""
shared/io/output/report.py - 비활성 로드밸런서 보고서

Inactive 레코드만 종류별로 출력합니다.

형식:
    - tabled: rich Table
    - csv: 헤더 + 행 텍스트 (stdout용)
    - file: {output_dir}/{account_id}_inactive_{elb|elbv2}s.csv

Usage:
    from shared.io.output.report import format_csv, write_account_csv

    text = format_csv(records, LBKind.CLASSIC)
    path = write_account_csv("111122223333", records, LBKind.V2)
"""

from __future__ import annotations

import csv
import io
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from core.config import settings

if TYPE_CHECKING:
    from plugins.elb.common import DeletionOutcome, LBKind, ResourceRecord

logger = logging.getLogger(__name__)

CSV_HEADERS: dict[str, list[str]] = {
    "elb": ["name", "state", "region", "vpc_id"],
    "elbv2": ["arn", "state", "region", "vpc_id"],
}


def _inactive_of(records: Iterable[ResourceRecord], kind: LBKind | str) -> list[ResourceRecord]:
    token = str(kind)
    return [r for r in records if r.is_inactive and str(r.kind) == token]


def report_filename(account_id: str, kind: LBKind | str) -> str:
    """계정/종류별 보고서 파일명"""
    return f"{account_id}_inactive_{kind}s.csv"


def format_csv(records: Iterable[ResourceRecord], kind: LBKind | str) -> str:
    """Inactive 레코드를 CSV 텍스트로 변환 (헤더 포함)"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS[str(kind)])
    for record in _inactive_of(records, kind):
        writer.writerow(record.to_row())
    return buffer.getvalue()


def render_table(records: Iterable[ResourceRecord], kind: LBKind | str, title: str = "") -> Table:
    """Inactive 레코드 rich Table 생성"""
    table = Table(title=title or None, show_header=True, header_style="bold magenta")
    for column in CSV_HEADERS[str(kind)]:
        table.add_column(column)
    for record in _inactive_of(records, kind):
        table.add_row(*record.to_row())
    return table


def write_account_csv(
    account_id: str,
    records: Iterable[ResourceRecord],
    kind: LBKind | str,
    output_dir: str | Path | None = None,
) -> Path:
    """계정의 Inactive 레코드를 CSV 파일로 저장

    Args:
        account_id: 계정 ID (파일명 접두어)
        records: 레코드 목록 (Inactive/종류 필터는 내부에서 적용)
        kind: LB 종류
        output_dir: 출력 디렉토리 (기본: settings.OUTPUT_DIR)

    Returns:
        생성된 파일 경로
    """
    directory = Path(output_dir or settings.OUTPUT_DIR)
    os.makedirs(directory, exist_ok=True)
    filepath = directory / report_filename(account_id, kind)

    rows = _inactive_of(records, kind)
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(CSV_HEADERS[str(kind)])
        for record in rows:
            writer.writerow(record.to_row())

    logger.info(f"보고서 저장: {filepath} ({len(rows)}건)")
    return filepath


def render_outcomes(outcomes: Iterable[DeletionOutcome], title: str = "삭제 결과") -> Table:
    """삭제 결과 rich Table 생성"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in ("identifier", "kind", "region", "result", "detail"):
        table.add_column(column)
    for outcome in outcomes:
        result = "[green]deleted[/green]" if outcome.succeeded else "[red]failed[/red]"
        table.add_row(outcome.identifier, str(outcome.kind), outcome.region, result, escape(outcome.error_detail or ""))
    return table
