"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력을 위한 함수들

- console: 상태/진단 메시지용 (stderr)
- out_console: 보고서 출력용 (stdout)
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# botocore 노이즈 로그 제한
NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "urllib3",
)


def get_console(stderr: bool = True) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다.

    Args:
        stderr: True면 stderr로 출력 (보고서 외 메시지)
    """
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()
out_console = get_console(stderr=False)


def configure_logging(verbosity: int = 0) -> None:
    """CLI 로깅 설정

    Args:
        verbosity: 0 = WARNING, 1 = INFO(-v), 2 이상 = DEBUG(-vv)
    """
    root = logging.getLogger()

    if verbosity <= 0:
        # INFO 로그가 보고서 출력에 섞이지 않도록 WARNING
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        root.setLevel(logging.WARNING)
    else:
        level = logging.INFO if verbosity == 1 else logging.DEBUG
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=verbosity > 1)
        handler.setFormatter(logging.Formatter("%(threadName)s %(message)s", datefmt="[%X]"))
        root.handlers = [handler]
        root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# 표준 출력 스타일
# =============================================================================

# 상태 심볼
SYMBOL_SUCCESS = "✓"  # 완료
SYMBOL_ERROR = "✗"  # 에러
SYMBOL_WARNING = "!"  # 경고
SYMBOL_INFO = "•"  # 정보


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_table(table: Table) -> None:
    """보고서 테이블 출력 (stdout)"""
    out_console.print(table)
