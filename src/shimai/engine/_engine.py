"""SessionEngine — 割り込みハンドラの登録から作業完了までを統括する。

1. SIGINT ハンドラ登録（install_interrupt_handler）
2. 引数のログ出力
3. 作業コルーチン構築
4. 作業と通知の競争（run_work_loop）
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine

from shimai.engine._logger import LoggerHandle
from shimai.engine._signal import install_interrupt_handler
from shimai.engine._work import do_work
from shimai.engine._work_loop import run_work_loop
from shimai.models.args import RunArgs
from shimai.models.exit_code import ExitCode

logger = logging.getLogger(__name__)

type WorkFactory = Callable[[RunArgs], Coroutine[object, object, object]]
"""検証済み引数から作業コルーチンを生成する関数。"""


async def run_session(
    args: RunArgs,
    log_handle: LoggerHandle,
    *,
    work: WorkFactory | None = None,
) -> ExitCode:
    """割り込みハンドラを登録して作業を実行する。

    Args:
        args: 検証済みの実行引数。
        log_handle: 稼働中のログシンク。エントリポイントが所有する。
        work: 作業コルーチンのファクトリ。None の場合は do_work。

    Returns:
        作業の終了コード。

    Raises:
        SetupFailure: 割り込みハンドラの登録に失敗した場合。
        Exception: 作業から伝播した例外。
    """
    receiver = install_interrupt_handler()
    logger.info("%r", args)

    factory = work if work is not None else do_work
    try:
        coroutine = factory(args)
    except BaseException:
        receiver.close()
        raise

    return await run_work_loop(coroutine, receiver, log_handle)
