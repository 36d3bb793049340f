"""ErrorReport — 原因連鎖付きのエラー表示。

出力形式:
    error: <最外のエラー>
    caused by: <原因>
    caused by: <根本原因>

    <トレースバック、または有効化方法のヒント>
"""

from __future__ import annotations

import traceback
from collections.abc import Iterator

from shimai.config import resolve_config
from shimai.models.config import BACKTRACE_ENV

BACKTRACE_HINT = (
    f"Please set the environment variable {BACKTRACE_ENV}=1 to enable backtraces."
)
NO_BACKTRACE = "No backtrace available"


def iter_causes(error: BaseException) -> Iterator[BaseException]:
    """error の原因を外側から順に列挙する（error 自身は含まない）。

    ``__cause__`` を優先し、なければ抑制されていない ``__context__`` を辿る。
    循環参照は打ち切る。
    """
    seen = {id(error)}
    current: BaseException | None = error
    while current is not None:
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
        if current is None or id(current) in seen:
            return
        seen.add(id(current))
        yield current


def _describe(error: BaseException) -> str:
    message = str(error)
    return message if message else type(error).__name__


def format_error_chain(error: BaseException, *, backtrace: bool | None = None) -> str:
    """エラーとその原因連鎖を整形する。

    Args:
        error: 表示するエラー。
        backtrace: トレースバックを含めるか。None の場合は環境変数
            SHIMAI_BACKTRACE に従う。

    Returns:
        末尾改行付きの整形済み文字列。
    """
    if backtrace is None:
        backtrace = resolve_config().backtrace

    lines = [f"error: {_describe(error)}"]
    lines.extend(f"caused by: {_describe(cause)}" for cause in iter_causes(error))
    lines.append("")

    if not backtrace:
        lines.append(BACKTRACE_HINT)
    elif error.__traceback__ is None:
        lines.append(NO_BACKTRACE)
    else:
        lines.append("".join(traceback.format_exception(error)).rstrip("\n"))

    return "\n".join(lines) + "\n"
