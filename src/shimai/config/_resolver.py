"""設定リゾルバー。

環境変数から ShimaiConfig を構築する。呼び出し時点の環境を読む。
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from shimai.models.config import BACKTRACE_ENV, LOG_FILTER_ENV, ShimaiConfig

_ENV_KEYS: dict[str, str] = {
    LOG_FILTER_ENV: "log_filter",
    BACKTRACE_ENV: "backtrace",
}


def collect_env_layer(environ: Mapping[str, str]) -> dict[str, object]:
    """環境変数辞書から設定項目に対応する値のみを抽出する。

    未設定の変数は「未指定」としてスキップし、デフォルト値に委ねる。

    Args:
        environ: 環境変数辞書。

    Returns:
        設定キー → 値の辞書。
    """
    return {
        field: environ[env_key] for env_key, field in _ENV_KEYS.items() if env_key in environ
    }


def resolve_config(environ: Mapping[str, str] | None = None) -> ShimaiConfig:
    """環境変数を解決し ShimaiConfig を構築する。

    Args:
        environ: 参照する環境変数辞書。None の場合は os.environ。

    Returns:
        バリデーション済みの ShimaiConfig。

    Raises:
        pydantic.ValidationError: 値が不正な場合。
    """
    source = os.environ if environ is None else environ
    return ShimaiConfig.model_validate(collect_env_layer(source))
