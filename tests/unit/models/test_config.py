"""ShimaiConfig のテスト。"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shimai.models.config import ShimaiConfig


class TestShimaiConfigDefaults:
    """デフォルト値のみで有効なインスタンスを構築できる。"""

    def test_log_filter_defaults_to_none(self) -> None:
        assert ShimaiConfig().log_filter is None

    def test_backtrace_disabled_by_default(self) -> None:
        assert ShimaiConfig().backtrace is False


class TestShimaiConfigBacktraceFlag:
    """環境変数の文字列からバックトレースフラグへの変換。"""

    @pytest.mark.parametrize("raw", ["1", "full", "true", "yes"])
    def test_non_empty_value_enables(self, raw: str) -> None:
        assert ShimaiConfig.model_validate({"backtrace": raw}).backtrace is True

    @pytest.mark.parametrize("raw", ["", "0", " 0 "])
    def test_empty_or_zero_disables(self, raw: str) -> None:
        assert ShimaiConfig.model_validate({"backtrace": raw}).backtrace is False

    def test_bool_passes_through(self) -> None:
        assert ShimaiConfig(backtrace=True).backtrace is True


class TestShimaiConfigLogFilter:
    """ログフィルタ指定の正規化。"""

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_blank_value_is_unset(self, raw: str) -> None:
        assert ShimaiConfig.model_validate({"log_filter": raw}).log_filter is None

    def test_value_kept_verbatim(self) -> None:
        assert ShimaiConfig.model_validate({"log_filter": "info"}).log_filter == "info"


class TestShimaiConfigStrictness:
    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ShimaiConfig.model_validate({"color": "always"})
