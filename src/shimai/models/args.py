"""実行引数モデル。

CLI 層が解析・検証した結果をコアに渡すための不変モデル。
コアは sys.argv を直接読まない。
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import Field

from shimai.models._base import ShimaiBaseModel

DEFAULT_PORT: Final[int] = 8080
DEFAULT_ADDRESS: Final[str] = "127.0.0.1"


class FileArgs(ShimaiBaseModel):
    """file-based モードの引数。

    Attributes:
        file: 対象ファイルパス。
        blubber: 任意のコマンド名。
    """

    file: Path
    blubber: str | None = Field(default=None, min_length=1)


class NetworkArgs(ShimaiBaseModel):
    """network-based モードの引数。

    Attributes:
        port: 待ち受けポート（0-65535）。
        address: 待ち受けアドレス。
    """

    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    address: str = Field(default=DEFAULT_ADDRESS, min_length=1)


type RunArgs = FileArgs | NetworkArgs
"""コアが受け取る検証済み引数。"""
