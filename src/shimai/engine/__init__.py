"""シャットダウン協調エンジン。

以下の順で割り込み駆動のシャットダウンを協調する:

1. ログシンク初期化（init_logging）
2. SIGINT ハンドラ登録（install_interrupt_handler）
3. 作業と割り込み通知の競争（run_work_loop）
4. ログシンクの flush（LoggerHandle.shutdown）
"""

from shimai.engine._channel import (
    ChannelClosed,
    ChannelFull,
    NotificationReceiver,
    NotificationSender,
    open_channel,
)
from shimai.engine._engine import WorkFactory, run_session
from shimai.engine._errors import SetupFailure
from shimai.engine._log_filter import LogFilter, LogFilterError, parse_log_filter
from shimai.engine._logger import DEFAULT_FILTER, LoggerHandle, init_logging
from shimai.engine._signal import install_interrupt_handler
from shimai.engine._work import WorkError, buggy_work, do_work
from shimai.engine._work_loop import run_work_loop

__all__ = [
    "ChannelClosed",
    "ChannelFull",
    "DEFAULT_FILTER",
    "LogFilter",
    "LogFilterError",
    "LoggerHandle",
    "NotificationReceiver",
    "NotificationSender",
    "SetupFailure",
    "WorkError",
    "WorkFactory",
    "buggy_work",
    "do_work",
    "init_logging",
    "install_interrupt_handler",
    "open_channel",
    "parse_log_filter",
    "run_session",
    "run_work_loop",
]
