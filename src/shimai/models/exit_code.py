"""ExitCode — 終了コードの定義。

各終了経路は固定の終了コードに対応する。
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。

    ARGUMENT_PARSING は CLI の引数解析層のみが返し、コアは返さない。
    FORCED_TERMINATION は負値で、OS 上は 255 として観測される。
    """

    SUCCESS = 0
    ARGUMENT_PARSING = 1
    UNHANDLED_FAILURE = 2
    SETUP_FAILURE = 3
    FORCED_TERMINATION = -1
