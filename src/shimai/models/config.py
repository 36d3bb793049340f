"""設定管理モデル。

環境変数から解決される実行時設定。
"""

from __future__ import annotations

from typing import Final

from pydantic import Field, field_validator

from shimai.models._base import ShimaiBaseModel

LOG_FILTER_ENV: Final[str] = "SHIMAI_LOG"
"""ログフィルタ指定を読む環境変数名。"""

BACKTRACE_ENV: Final[str] = "SHIMAI_BACKTRACE"
"""バックトレース表示を有効化する環境変数名。"""

_FALSY_VALUES: Final[frozenset[str]] = frozenset({"", "0"})


class ShimaiConfig(ShimaiBaseModel):
    """全設定項目を統合した不変モデル。

    デフォルト値のみで有効なインスタンスを構築可能。
    """

    log_filter: str | None = Field(default=None)
    backtrace: bool = False

    @field_validator("log_filter", mode="before")
    @classmethod
    def blank_filter_as_unset(cls, v: object) -> object:
        """空白のみのフィルタ指定は未設定として扱う。"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("backtrace", mode="before")
    @classmethod
    def parse_backtrace_flag(cls, v: object) -> object:
        """環境変数の文字列をフラグに変換する。未設定・空文字・"0" は無効扱い。"""
        if isinstance(v, str):
            return v.strip() not in _FALSY_VALUES
        return v
