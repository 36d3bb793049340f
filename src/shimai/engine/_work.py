"""作業本体のサンプル実装。"""

from __future__ import annotations

import asyncio
import logging

from shimai.models.args import RunArgs

logger = logging.getLogger(__name__)

WORK_PROMPT = "Doing some work... Press ctrl+c to exit..."


class WorkError(Exception):
    """作業中に発生したエラー。"""


async def do_work(args: RunArgs, duration: float | None = None) -> None:
    """作業開始を stdout に表示し、指定秒数（None なら無期限）待機する。"""
    logger.debug("Working on %r", args)
    print(WORK_PROMPT, flush=True)
    if duration is None:
        await asyncio.get_running_loop().create_future()
    else:
        await asyncio.sleep(duration)


async def buggy_work(args: RunArgs) -> None:
    """原因付きのエラーを送出する作業。未処理エラー経路の確認用。"""
    logger.error("A bug is about to occur!")
    try:
        raise RuntimeError("The bug feature is enabled")
    except RuntimeError as e:
        raise WorkError("Some context for where the error caused problems") from e
