"""
tests/shared/io/output/test_report.py - 비활성 로드밸런서 보고서 테스트
"""

import pytest
from rich.console import Console

from plugins.elb.common import ActivityState, DeletionOutcome, LBKind, ResourceRecord
from shared.io.output.report import (
    format_csv,
    render_outcomes,
    render_table,
    report_filename,
    write_account_csv,
)

V2_ARN = "arn:aws:elasticloadbalancing:us-east-1:111122223333:loadbalancer/app/web/50dc6c495c0c9188"


@pytest.fixture
def records():
    return [
        ResourceRecord("lb1", LBKind.CLASSIC, "us-east-1", "vpc-1", ActivityState.INACTIVE),
        ResourceRecord("lb2", LBKind.CLASSIC, "us-east-1", "vpc-1", ActivityState.ACTIVE),
        ResourceRecord(V2_ARN, LBKind.V2, "us-east-1", "vpc-2", ActivityState.INACTIVE),
    ]


def _render(table):
    console = Console(width=400, record=True)
    console.print(table)
    return console.export_text()


class TestFormatCsv:
    """format_csv 테스트"""

    def test_classic_only_inactive(self, records):
        assert format_csv(records, LBKind.CLASSIC) == "name,state,region,vpc_id\nlb1,Inactive,us-east-1,vpc-1\n"

    def test_v2_header(self, records):
        lines = format_csv(records, "elbv2").splitlines()

        assert lines[0] == "arn,state,region,vpc_id"
        assert lines[1] == f"{V2_ARN},Inactive,us-east-1,vpc-2"
        assert len(lines) == 2

    def test_header_only_when_empty(self):
        assert format_csv([], LBKind.CLASSIC) == "name,state,region,vpc_id\n"


class TestWriteAccountCsv:
    """write_account_csv 테스트"""

    def test_filename(self):
        assert report_filename("111122223333", LBKind.CLASSIC) == "111122223333_inactive_elbs.csv"
        assert report_filename("111122223333", LBKind.V2) == "111122223333_inactive_elbv2s.csv"

    def test_writes_file(self, records, tmp_path):
        path = write_account_csv("111122223333", records, LBKind.CLASSIC, output_dir=tmp_path / "outputs")

        assert path == tmp_path / "outputs" / "111122223333_inactive_elbs.csv"
        assert path.read_text(encoding="utf-8") == "name,state,region,vpc_id\nlb1,Inactive,us-east-1,vpc-1\n"

    def test_default_output_dir(self, records, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        path = write_account_csv("111122223333", records, LBKind.V2)

        assert path.as_posix() == "outputs/111122223333_inactive_elbv2s.csv"
        assert (tmp_path / path).exists()


class TestRender:
    """rich 테이블 렌더링 테스트"""

    def test_render_table(self, records):
        text = _render(render_table(records, LBKind.CLASSIC, title="CLB"))

        assert "lb1" in text
        assert "lb2" not in text
        assert "vpc_id" in text

    def test_render_outcomes_escapes_detail(self):
        outcomes = [
            DeletionOutcome("lb1", LBKind.CLASSIC, "us-east-1", True),
            DeletionOutcome("lb3", LBKind.CLASSIC, "us-east-1", False, "[AccessDenied] not allowed"),
        ]

        text = _render(render_outcomes(outcomes))

        assert "deleted" in text
        assert "failed" in text
        assert "[AccessDenied] not allowed" in text
