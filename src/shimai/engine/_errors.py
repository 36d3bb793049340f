"""起動時エラーの定義。"""


class SetupFailure(Exception):
    """ロガーまたは割り込みハンドラの初期化失敗。

    作業開始前に発生する致命的エラー。原因は ``__cause__`` で連鎖させる。
    """
