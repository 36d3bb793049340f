"""LoggerLifecycle — プロセス全体のログシンクの初期化と終了処理。

ログレコードは root ロガーの QueueHandler を経由してキューに積まれ、
QueueListener のスレッドが実際のシンク（stderr）へ書き出す。
LoggerHandle.shutdown() はキューを同期的に排出してシンクを flush する。

強制終了（os._exit）はこの保証の対象外で、未出力のレコードは失われうる。
"""

from __future__ import annotations

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import Final, TextIO

from rich.console import Console
from rich.logging import RichHandler

from shimai.config import resolve_config
from shimai.engine._errors import SetupFailure
from shimai.engine._log_filter import LogFilter, LogFilterError, parse_log_filter

DEFAULT_FILTER: Final[str] = "warn,shimai=debug"
"""フィルタ未指定時の既定ディレクティブ。全体は warn、本アプリは debug。"""

_PLAIN_FORMAT: Final[str] = (
    "%(relativeCreated)12.3fms %(levelname)-5s "
    "%(threadName)s(%(thread)d) %(name)s: %(message)s"
)

_initialized: bool = False


class LoggerHandle:
    """稼働中のログシンクを表すハンドル。

    プロセスのエントリポイントが所有し、終了経路で shutdown() を呼ぶ。
    with 文でも使用できる。
    """

    def __init__(
        self,
        queue_handler: QueueHandler,
        listener: QueueListener,
        sink: logging.Handler,
        previous_levels: dict[str, int],
    ) -> None:
        self._queue_handler = queue_handler
        self._listener = listener
        self._sink = sink
        self._previous_levels = previous_levels
        self._closed = False

    @property
    def closed(self) -> bool:
        """shutdown() 済みかどうか。"""
        return self._closed

    def shutdown(self) -> None:
        """バッファ済みレコードを同期的に書き出し、シンクを切り離す。

        冪等。flush は最初の呼び出しでのみ行われる。
        """
        if self._closed:
            return
        self._closed = True

        root = logging.getLogger()
        root.removeHandler(self._queue_handler)
        # stop() は番兵を積んでリスナースレッドの終了を待つ。番兵より前のレコードは全て処理される
        self._listener.stop()
        self._sink.flush()
        self._sink.close()

        for name, level in self._previous_levels.items():
            logging.getLogger(name).setLevel(level)

    def __enter__(self) -> LoggerHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def _build_sink(stream: TextIO) -> logging.Handler:
    """ストリームの TTY 状態に応じたシンクを生成する。

    TTY の場合は RichHandler、非 TTY の場合は稼働時間・レベル・スレッド・
    ロガー名を含むプレーンテキストの StreamHandler。
    """
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return RichHandler(
            console=Console(file=stream),
            show_path=False,
            log_time_format="[%X]",
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    return handler


def _apply_filter(log_filter: LogFilter) -> dict[str, int]:
    """フィルタをロガー階層に適用し、変更前のレベルを返す。

    root ロガー（キー ""）に既定レベル、各ターゲットのロガーに個別レベルを設定する。
    より具体的なターゲットが優先されるのはロガー階層の実効レベル解決による。
    """
    previous: dict[str, int] = {"": logging.getLogger().level}
    logging.getLogger().setLevel(log_filter.default_level)

    for target, level in log_filter.targets.items():
        target_logger = logging.getLogger(target)
        previous.setdefault(target, target_logger.level)
        target_logger.setLevel(level)
    return previous


def init_logging(
    filter_spec: str | None = None,
    *,
    stream: TextIO | None = None,
) -> LoggerHandle:
    """プロセス全体のログシンクを初期化する。プロセスにつき 1 回のみ呼び出せる。

    Args:
        filter_spec: フィルタ指定。None の場合は環境変数 SHIMAI_LOG、
            それも未設定なら DEFAULT_FILTER。
        stream: シンクの出力先。None の場合は sys.stderr。

    Returns:
        稼働中シンクの LoggerHandle。

    Raises:
        SetupFailure: 既に初期化済みの場合、またはフィルタ指定が不正な場合。
    """
    global _initialized

    if _initialized:
        raise SetupFailure("Logger has already been initialized")

    if filter_spec is None:
        filter_spec = resolve_config().log_filter
    if filter_spec is None:
        filter_spec = DEFAULT_FILTER

    try:
        log_filter = parse_log_filter(filter_spec)
    except LogFilterError as e:
        raise SetupFailure("Could not set up logging") from e

    sink = _build_sink(stream if stream is not None else sys.stderr)
    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    queue_handler = QueueHandler(records)
    listener = QueueListener(records, sink, respect_handler_level=True)

    previous_levels = _apply_filter(log_filter)
    logging.getLogger().addHandler(queue_handler)
    listener.start()
    _initialized = True

    handle = LoggerHandle(queue_handler, listener, sink, previous_levels)
    atexit.register(handle.shutdown)
    return handle
