"""ユニットテスト共通フィクスチャ。

ロガーと割り込みハンドラはプロセスにつき 1 回のみ初期化できるため、
テストごとにモジュール状態を戻す。実際の SIGINT ハンドラはテストプロセスに登録しない。
"""

from __future__ import annotations

import io
import signal
from collections.abc import Callable, Iterator
from types import FrameType
from unittest.mock import MagicMock, patch

import pytest

from shimai.engine import _logger, _signal
from shimai.engine._logger import LoggerHandle, init_logging

type SignalHandler = Callable[[int, FrameType | None], None]


@pytest.fixture(autouse=True)
def _reset_process_wide_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """初期化済みフラグと関連する環境変数をリセットする。"""
    monkeypatch.setattr(_logger, "_initialized", False)
    monkeypatch.setattr(_signal, "_installed", False)
    monkeypatch.setattr(_signal, "_wakeup", None)
    monkeypatch.delenv("SHIMAI_LOG", raising=False)
    monkeypatch.delenv("SHIMAI_BACKTRACE", raising=False)
    yield
    if _signal._wakeup is not None:
        for sock in _signal._wakeup:
            sock.close()


@pytest.fixture(autouse=True)
def mock_signal() -> Iterator[MagicMock]:
    """signal.signal をモックし、登録されたハンドラを記録する。"""
    with patch("signal.signal") as mocked:
        yield mocked


@pytest.fixture(autouse=True)
def mock_wakeup_fd() -> Iterator[MagicMock]:
    """signal.set_wakeup_fd をモックする。テストプロセスの wakeup fd は変更しない。"""
    with patch("signal.set_wakeup_fd", return_value=-1) as mocked:
        yield mocked


@pytest.fixture
def mock_force_exit() -> Iterator[MagicMock]:
    """強制終了を SystemExit 送出に置き換える。"""
    with patch(
        "shimai.engine._signal._force_exit", side_effect=SystemExit
    ) as mocked:
        yield mocked


@pytest.fixture
def mock_notice() -> Iterator[MagicMock]:
    """fd 2 への通知書き込みをモックする。"""
    with patch("shimai.engine._signal._write_notice") as mocked:
        yield mocked


@pytest.fixture
def log_stream() -> io.StringIO:
    """ログシンクの出力先。"""
    return io.StringIO()


@pytest.fixture
def log_handle(log_stream: io.StringIO) -> Iterator[LoggerHandle]:
    """既定フィルタで初期化したログシンク。テスト終了時に shutdown する。"""
    handle = init_logging(_logger.DEFAULT_FILTER, stream=log_stream)
    yield handle
    handle.shutdown()


@pytest.fixture
def sigint_handler(mock_signal: MagicMock) -> Callable[[], SignalHandler]:
    """最後に登録された SIGINT ハンドラを取り出す関数を返す。

    asyncio.Runner も SIGINT ハンドラを登録するため、最後の登録を本アプリのものとみなす。
    """

    def _latest() -> SignalHandler:
        calls = [c for c in mock_signal.call_args_list if c[0][0] == signal.SIGINT]
        assert calls, "SIGINT handler was not registered"
        return calls[-1][0][1]

    return _latest
