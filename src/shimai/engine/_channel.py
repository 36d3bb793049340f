"""NotificationChannel — 単一スロットの通知チャネル。

送信側はシグナルコンテキスト、受信側はイベントループ上の WorkLoop。
スロットが空（Idle）か埋まっている（ShutdownRequested）か、受信側が
閉じているかの 3 状態がそのままエスカレーション判定になる。

送信は非ブロッキングでロックを取らない。受信側の起床は
loop.call_soon_threadsafe（self-pipe への書き込み）で行う。
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


class ChannelFull(Exception):
    """未消費の通知が既にスロットにある。"""


class ChannelClosed(Exception):
    """受信側が閉じている（またはイベントループが終了している）。"""


@dataclass
class _Slot:
    loop: asyncio.AbstractEventLoop
    pending: bool = False
    closed: bool = False
    waiter: asyncio.Future[None] | None = None


def _wake(slot: _Slot) -> None:
    """イベントループ上で待機中の受信者を起こす。"""
    waiter = slot.waiter
    if waiter is not None and not waiter.done():
        waiter.set_result(None)


class NotificationSender:
    """チャネルの送信側。シグナルハンドラが保持する。"""

    def __init__(self, slot: _Slot) -> None:
        self._slot = slot

    def try_send(self) -> None:
        """通知を非ブロッキングで送信する。

        Raises:
            ChannelClosed: 受信側が閉じている、またはループが終了している場合。
            ChannelFull: 未消費の通知がある場合。
        """
        slot = self._slot
        if slot.closed or slot.loop.is_closed():
            raise ChannelClosed
        if slot.pending:
            raise ChannelFull
        slot.pending = True
        slot.loop.call_soon_threadsafe(_wake, slot)


class NotificationReceiver:
    """チャネルの受信側。WorkLoop が保持し、終了時に close() する。"""

    def __init__(self, slot: _Slot) -> None:
        self._slot = slot

    @property
    def pending(self) -> bool:
        """未消費の通知があるかどうか。"""
        return self._slot.pending

    @property
    def closed(self) -> bool:
        """受信側が閉じられているかどうか。"""
        return self._slot.closed

    async def recv(self, *, close: bool = False) -> None:
        """通知が届くまで待機し、届いた通知を消費する。

        Args:
            close: True の場合、スロットを空ける前に受信側を閉じる。
                消費から close() までの間に届いた送信が通知として扱われることはない。

        Raises:
            ChannelClosed: 待機前または待機中に close() された場合。
        """
        slot = self._slot
        while not slot.pending:
            if slot.closed:
                raise ChannelClosed
            slot.waiter = slot.loop.create_future()
            try:
                await slot.waiter
            finally:
                slot.waiter = None
        if close:
            slot.closed = True
        slot.pending = False

    def close(self) -> None:
        """受信側を閉じる。以降の送信は ChannelClosed になる。冪等。"""
        slot = self._slot
        slot.closed = True
        waiter = slot.waiter
        if waiter is not None and not waiter.done():
            waiter.set_exception(ChannelClosed())


def open_channel(
    loop: asyncio.AbstractEventLoop,
) -> tuple[NotificationSender, NotificationReceiver]:
    """容量 1 の通知チャネルを生成する。

    Args:
        loop: 受信側が待機するイベントループ。

    Returns:
        (送信側, 受信側) のタプル。
    """
    slot = _Slot(loop=loop)
    return NotificationSender(slot), NotificationReceiver(slot)
