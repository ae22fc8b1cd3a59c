# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

보고서는 stdout(out_console), 상태/진단 메시지는 stderr(console)로 출력합니다.
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    configure_logging,
    console,
    get_console,
    out_console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)

__all__: list[str] = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "configure_logging",
    "console",
    "get_console",
    "out_console",
    "print_error",
    "print_info",
    "print_success",
    "print_table",
    "print_warning",
]
