"""WorkLoop — 作業と割り込み通知の競争。

作業タスクと通知待機タスクのうち先に完了した方で結果を決める。
ポーリングもタイムアウトもない。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from contextlib import suppress

from shimai.engine._channel import ChannelClosed, NotificationReceiver
from shimai.engine._logger import LoggerHandle
from shimai.models.exit_code import ExitCode

logger = logging.getLogger(__name__)


async def run_work_loop(
    work: Coroutine[object, object, object],
    receiver: NotificationReceiver,
    log_handle: LoggerHandle,
) -> ExitCode:
    """作業を実行しつつ、割り込み通知を並行して待機する。

    競争が決着した時点で受信側を閉じる。通知を消費した場合は消費と同時に閉じる。
    以降の SIGINT は強制終了になる。

    作業が先に完了した場合は ExitCode.SUCCESS を返す（作業の例外はそのまま伝播）。
    通知が先に届いた場合は作業タスクをキャンセルして放棄し、
    ログシンクを flush してから ExitCode.SUCCESS を返す。

    Args:
        work: 実行する作業のコルーチン。
        receiver: SignalBridge が返した通知の受信側。
        log_handle: 稼働中のログシンク。

    Returns:
        ExitCode.SUCCESS。

    Raises:
        Exception: 作業から伝播した例外。
    """
    work_task: asyncio.Task[object] = asyncio.create_task(work)
    interrupt_waiter: asyncio.Task[None] = asyncio.create_task(
        receiver.recv(close=True)
    )

    try:
        done, _ = await asyncio.wait(
            {work_task, interrupt_waiter},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        receiver.close()

    if work_task in done:
        interrupt_waiter.cancel()
        with suppress(asyncio.CancelledError, ChannelClosed):
            await interrupt_waiter
        work_task.result()
        logger.debug("Work completed")
        return ExitCode.SUCCESS

    logger.info("Received Ctrl+C")
    work_task.cancel()
    with suppress(asyncio.CancelledError):
        await work_task
    logger.debug("Work abandoned, shutting down")
    log_handle.shutdown()
    return ExitCode.SUCCESS
