"""CliApp — Typer アプリケーション定義。

引数の解析・検証はこの層の責務で、コアには検証済みの RunArgs のみを渡す。
進捗表示・エラー・ログは stderr、作業の出力は stdout。

終了コード:
    0: 正常終了、グレースフルシャットダウン、--help、--version
    1: 引数解析エラー
    2: 作業から伝播した未処理エラー
    3: ロガーまたは割り込みハンドラの初期化失敗
    -1 (255): 割り込みのエスカレーションによる強制終了
"""

from __future__ import annotations

import asyncio
import importlib.metadata
import os
import platform
import sys
from collections.abc import Coroutine
from contextlib import suppress
from pathlib import Path
from typing import Annotated, NoReturn

import click
import typer
from pydantic import ValidationError

from shimai.cli._error_report import format_error_chain
from shimai.engine import (
    SetupFailure,
    WorkFactory,
    buggy_work,
    do_work,
    init_logging,
    run_session,
)
from shimai.models.args import DEFAULT_ADDRESS, DEFAULT_PORT, FileArgs, NetworkArgs, RunArgs
from shimai.models.exit_code import ExitCode

_BUG_KEY = "_bug"

app = typer.Typer(
    name="shimai",
    help=(
        "Sample CLI skeleton with graceful Ctrl+C shutdown.\n\n"
        "Press Ctrl+C once to stop gracefully, twice to terminate immediately."
    ),
    add_completion=False,
)


def _version_text() -> str:
    """バージョン番号とビルド環境情報を整形する。"""
    version = importlib.metadata.version("shimai")
    return (
        f"{version}\n"
        f"Running on {platform.python_implementation()} {platform.python_version()} "
        f"for {platform.system()} {platform.machine()}."
    )


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョン情報を出力して終了する。"""
    if value:
        print(_version_text())
        raise typer.Exit()


def _exception_base(error_type: type[Exception], name: str) -> type[Exception]:
    """error_type の MRO から指定名のクラスを探す。見つからなければ error_type 自身。"""
    for cls in error_type.__mro__:
        if cls.__name__ == name and issubclass(cls, Exception):
            return cls
    return error_type


# typer が click を内包する版では、送出される例外は click のクラスとは別になる
_USAGE_ERRORS: tuple[type[Exception], ...] = (
    click.ClickException,
    _exception_base(typer.BadParameter, "ClickException"),
)
_ABORTS: tuple[type[BaseException], ...] = (click.exceptions.Abort, typer.Abort)


def _exit_process(code: int) -> NoReturn:
    """標準出力を flush し、インタプリタの終了処理を経由せずにプロセスを終了する。

    終了直前まで SIGINT は登録済みのハンドラが処理する。
    """
    for stream in (sys.stdout, sys.stderr):
        with suppress(OSError, ValueError):
            stream.flush()
    os._exit(int(code))


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。

    Click を非スタンドアロンで実行し、引数解析エラーを終了コード 1 に揃える。
    """
    try:
        result = app(standalone_mode=False)
    except _USAGE_ERRORS as e:
        e.show()  # type: ignore[attr-defined]
        code = int(ExitCode.ARGUMENT_PARSING)
    except _ABORTS:
        # 割り込みハンドラ登録前の Ctrl+C
        print("Aborted!", file=sys.stderr)
        code = int(ExitCode.FORCED_TERMINATION)
    else:
        code = result if isinstance(result, int) else int(ExitCode.SUCCESS)

    _exit_process(code)


@app.callback()
def root_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
    bug: Annotated[
        bool,
        typer.Option("--bug", hidden=True, help="Fail with a chained error."),
    ] = False,
) -> None:
    """Run a unit of work until it finishes or Ctrl+C is pressed."""
    ctx.ensure_object(dict)[_BUG_KEY] = bug


_DurationOption = Annotated[
    float | None,
    typer.Option(
        "--duration",
        help="Stop working after SECONDS (default: run until interrupted).",
        min=0,
    ),
]


@app.command("file-based")
def file_based(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(metavar="FILE", help="Something, something, path.")],
    blubber: Annotated[
        str | None, typer.Argument(metavar="BLUBBER", help="Optional blubber command.")
    ] = None,
    duration: _DurationOption = None,
) -> None:
    """Work on a file."""
    try:
        args = FileArgs(file=file, blubber=blubber)
    except ValidationError as e:
        print(f"Error: Invalid arguments: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.ARGUMENT_PARSING) from None

    _run(ctx, args, duration)


@app.command("network-based")
def network_based(
    ctx: typer.Context,
    port: Annotated[
        int,
        typer.Option(
            "-p", "--port", envvar="PORT", help="Port to listen on.", min=0, max=65535
        ),
    ] = DEFAULT_PORT,
    address: Annotated[
        str, typer.Option("-a", "--address", help="Address to listen on.")
    ] = DEFAULT_ADDRESS,
    duration: _DurationOption = None,
) -> None:
    """Work on a network endpoint."""
    try:
        args = NetworkArgs(port=port, address=address)
    except ValidationError as e:
        print(f"Error: Invalid arguments: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.ARGUMENT_PARSING) from None

    _run(ctx, args, duration)


def _bug_enabled(ctx: typer.Context) -> bool:
    obj = ctx.find_root().obj or {}
    return bool(obj.get(_BUG_KEY, False))


def _run(ctx: typer.Context, args: RunArgs, duration: float | None) -> NoReturn:
    """作業セッションを実行し、終了コードで Typer を終了させる。"""
    try:
        code = execute(args, bug=_bug_enabled(ctx), duration=duration)
    except KeyboardInterrupt:
        # 割り込みハンドラ登録前の Ctrl+C
        raise typer.Abort() from None
    raise typer.Exit(code=code)


def _build_work(bug: bool, duration: float | None) -> WorkFactory:
    """作業コルーチンのファクトリを構築する。"""
    if bug:
        return buggy_work

    def _work(args: RunArgs) -> Coroutine[object, object, object]:
        return do_work(args, duration)

    return _work


def _report_error(error: BaseException) -> None:
    print(format_error_chain(error), file=sys.stderr, end="")


def execute(
    args: RunArgs,
    *,
    bug: bool = False,
    duration: float | None = None,
) -> ExitCode:
    """ログシンクを初期化して作業セッションを実行し、終了コードを返す。

    ログシンクは全ての非強制終了経路で、エラー表示より前に flush される。
    ロガー初期化に失敗した場合は割り込みハンドラを登録せずに終了する。

    Args:
        args: 検証済みの実行引数。
        bug: True の場合、原因付きエラーを送出する作業を実行する。
        duration: 作業時間（秒）。None の場合は割り込みまで継続。

    Returns:
        プロセス終了コード。
    """
    try:
        log_handle = init_logging()
    except SetupFailure as e:
        _report_error(e)
        return ExitCode.SETUP_FAILURE

    try:
        with log_handle:
            return asyncio.run(
                run_session(args, log_handle, work=_build_work(bug, duration))
            )
    except SetupFailure as e:
        _report_error(e)
        return ExitCode.SETUP_FAILURE
    except (KeyboardInterrupt, SystemExit):
        raise
    except Exception as e:
        _report_error(e)
        return ExitCode.UNHANDLED_FAILURE
