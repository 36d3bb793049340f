"""SignalBridge — SIGINT を単一の通知に変換する。

ハンドラはプロセス全体で 1 度だけ登録し、解除・再登録の経路は持たない。

エスカレーション:
    1 回目の SIGINT: 通知を送信し、グレースフルシャットダウンを要求する。
    未消費のまま 2 回目: 即座に強制終了する。
    受信側が閉じた後: 即座に強制終了する。

ハンドラはメインスレッドのバイトコード境界で任意に割り込むため、
スロットへの非ブロッキング送信と fd 2 への直接書き込みのみを行う。
logging はロックを取るためハンドラ内では使わない。

Python レベルのハンドラは、呼び出される前に届いた複数の SIGINT に対して
1 回しか呼ばれない。配送回数は signal.set_wakeup_fd のソケットに
C レベルのハンドラが 1 配送につき 1 バイト書き込むので、そのバイト数で数える。
"""

from __future__ import annotations

import asyncio
import os
import signal
import socket
from contextlib import suppress
from types import FrameType
from typing import Final

from shimai.engine._channel import (
    ChannelClosed,
    ChannelFull,
    NotificationReceiver,
    NotificationSender,
    open_channel,
)
from shimai.engine._errors import SetupFailure
from shimai.models.exit_code import ExitCode

_STDERR_FD: Final[int] = 2

RECEIVED_NOTICE: Final[str] = "\nReceived Ctrl+C..."
FORCED_NOTICE: Final[str] = "\nReceived Ctrl+C again: Terminating forcefully!"
UNDELIVERABLE_NOTICE: Final[str] = "\nReceived Ctrl+C. Terminating now."

_DRAIN_CHUNK: Final[int] = 4096

_installed: bool = False
_wakeup: tuple[socket.socket, socket.socket] | None = None
"""(読み出し側, 書き込み側)。書き込み側の fd を set_wakeup_fd に登録する。"""


def _open_wakeup_socket() -> tuple[socket.socket, socket.socket]:
    reader, writer = socket.socketpair()
    reader.setblocking(False)
    writer.setblocking(False)
    return reader, writer


def _count_deliveries(reader: socket.socket) -> int:
    """ソケットに溜まった SIGINT の配送回数を数える。

    ハンドラが呼ばれた以上、少なくとも 1 回の配送があったものとみなす。
    """
    count = 0
    while True:
        try:
            data = reader.recv(_DRAIN_CHUNK)
        except (BlockingIOError, InterruptedError):
            break
        if not data:
            break
        count += data.count(int(signal.SIGINT))
    return max(count, 1)


def _write_notice(message: str) -> None:
    """stderr にバッファを経由せず通知を書き込む。"""
    with suppress(OSError):
        os.write(_STDERR_FD, f"{message}\n".encode())


def _force_exit(code: ExitCode) -> None:
    """クリーンアップを経由せずにプロセスを終了する。"""
    os._exit(int(code))


def _handle_interrupt(sender: NotificationSender) -> None:
    """SIGINT 受信時の処理本体。"""
    try:
        sender.try_send()
    except ChannelFull:
        _write_notice(FORCED_NOTICE)
        _force_exit(ExitCode.FORCED_TERMINATION)
    except ChannelClosed:
        _write_notice(UNDELIVERABLE_NOTICE)
        _force_exit(ExitCode.FORCED_TERMINATION)
    else:
        _write_notice(RECEIVED_NOTICE)


def install_interrupt_handler(
    loop: asyncio.AbstractEventLoop | None = None,
) -> NotificationReceiver:
    """SIGINT ハンドラを登録し、通知の受信側を返す。

    プロセスにつき 1 回のみ呼び出せる。

    Args:
        loop: 受信側が待機するイベントループ。None の場合は実行中のループ。

    Returns:
        通知チャネルの受信側。

    Raises:
        SetupFailure: 既に登録済みの場合、またはハンドラ登録に失敗した場合
            （メインスレッド以外からの呼び出し等）。
    """
    global _installed, _wakeup

    if _installed:
        raise SetupFailure("Interrupt handler has already been installed")

    if loop is None:
        loop = asyncio.get_running_loop()
    sender, receiver = open_channel(loop)
    reader, writer = _open_wakeup_socket()

    def _on_interrupt(signum: int, frame: FrameType | None) -> None:
        for _ in range(_count_deliveries(reader)):
            _handle_interrupt(sender)

    try:
        previous_fd = signal.set_wakeup_fd(writer.fileno(), warn_on_full_buffer=False)
        try:
            signal.signal(signal.SIGINT, _on_interrupt)
        except (ValueError, OSError):
            signal.set_wakeup_fd(previous_fd)
            raise
    except (ValueError, OSError) as e:
        reader.close()
        writer.close()
        raise SetupFailure("Could not install the Ctrl+C handler") from e

    _wakeup = (reader, writer)
    _installed = True
    return receiver
