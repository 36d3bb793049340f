"""LogFilter — ログフィルタ指定の解析。

書式: カンマ区切りのディレクティブ列。各ディレクティブは ``LEVEL``（全体の既定）
または ``TARGET=LEVEL``（ロガー名プレフィックス単位）。

例: ``"warn,shimai=debug"``
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

TRACE: Final[int] = 5
OFF: Final[int] = logging.CRITICAL + 10

LEVELS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "trace": TRACE,
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "off": OFF,
    }
)
"""ディレクティブで使えるレベル名（大文字小文字非依存）。"""

logging.addLevelName(TRACE, "TRACE")


class LogFilterError(ValueError):
    """フィルタ指定の構文エラー。"""


@dataclass(frozen=True)
class LogFilter:
    """解析済みのフィルタ指定。

    Attributes:
        default_level: ターゲット指定に一致しないロガーのレベル。
            全体ディレクティブがない場合は OFF。
        targets: ロガー名 → レベル。同一ターゲットは後勝ち。
    """

    default_level: int = OFF
    targets: Mapping[str, int] = field(default_factory=dict)


def _parse_level(raw: str, directive: str) -> int:
    level = LEVELS.get(raw.strip().lower())
    if level is None:
        choices = ", ".join(LEVELS)
        msg = f"invalid level {raw.strip()!r} in directive {directive!r} (expected one of: {choices})"
        raise LogFilterError(msg)
    return level


def parse_log_filter(spec: str) -> LogFilter:
    """フィルタ指定文字列を解析する。

    空のディレクティブ（連続カンマや末尾カンマ）は無視する。

    Args:
        spec: フィルタ指定文字列。

    Returns:
        解析済みの LogFilter。

    Raises:
        LogFilterError: 不明なレベル、空のターゲット、``=`` が複数ある場合。
    """
    default_level = OFF
    targets: dict[str, int] = {}

    for raw_directive in spec.split(","):
        directive = raw_directive.strip()
        if not directive:
            continue

        parts = directive.split("=")
        if len(parts) == 1:
            default_level = _parse_level(parts[0], directive)
            continue
        if len(parts) > 2:
            msg = f"invalid directive {directive!r}: expected TARGET=LEVEL"
            raise LogFilterError(msg)

        target, level = parts[0].strip(), parts[1]
        if not target:
            msg = f"invalid directive {directive!r}: target must not be empty"
            raise LogFilterError(msg)
        targets[target] = _parse_level(level, directive)

    return LogFilter(default_level=default_level, targets=MappingProxyType(targets))
