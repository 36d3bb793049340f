"""shimai ドメインモデルパッケージ。"""

from shimai.models._base import ShimaiBaseModel
from shimai.models.args import FileArgs, NetworkArgs, RunArgs
from shimai.models.config import ShimaiConfig
from shimai.models.exit_code import ExitCode

__all__ = [
    "ExitCode",
    "FileArgs",
    "NetworkArgs",
    "RunArgs",
    "ShimaiBaseModel",
    "ShimaiConfig",
]
