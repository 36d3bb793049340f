"""shimai CLI パッケージ。

公開 API:
    app: Typer アプリケーションインスタンス。
    main: CLI エントリポイント。pyproject.toml から参照される。
    execute: ログシンク初期化から作業完了までのプロセス実行。
"""

from shimai.cli._app import app, execute, main

__all__ = ["app", "execute", "main"]
