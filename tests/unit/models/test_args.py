"""FileArgs / NetworkArgs のテスト。"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from shimai.models.args import DEFAULT_ADDRESS, DEFAULT_PORT, FileArgs, NetworkArgs


class TestFileArgs:
    """FileArgs の構築とバリデーション。"""

    def test_blubber_defaults_to_none(self) -> None:
        args = FileArgs(file=Path("input.txt"))
        assert args.file == Path("input.txt")
        assert args.blubber is None

    def test_accepts_blubber(self) -> None:
        args = FileArgs(file=Path("input.txt"), blubber="fizz")
        assert args.blubber == "fizz"

    def test_empty_blubber_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileArgs(file=Path("input.txt"), blubber="")

    def test_extra_field_rejected(self) -> None:
        """extra="forbid" により未知フィールドは拒否される。"""
        with pytest.raises(ValidationError):
            FileArgs.model_validate({"file": "input.txt", "port": 1})

    def test_is_frozen(self) -> None:
        args = FileArgs(file=Path("input.txt"))
        with pytest.raises(ValidationError):
            args.blubber = "x"  # type: ignore[misc]


class TestNetworkArgs:
    """NetworkArgs の構築とバリデーション。"""

    def test_defaults(self) -> None:
        args = NetworkArgs()
        assert args.port == DEFAULT_PORT == 8080
        assert args.address == DEFAULT_ADDRESS == "127.0.0.1"

    @pytest.mark.parametrize("port", [0, 1, 65535])
    def test_port_boundaries_accepted(self, port: int) -> None:
        assert NetworkArgs(port=port).port == port

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_out_of_range_rejected(self, port: int) -> None:
        with pytest.raises(ValidationError):
            NetworkArgs(port=port)

    def test_empty_address_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NetworkArgs(address="")
