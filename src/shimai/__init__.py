def main() -> None:
    """パッケージエントリポイント。cli.main() に委譲する。

    pyproject.toml の [project.scripts] は shimai.cli:main を直接参照するため、
    この関数は ``python -m shimai`` とプログラムからの呼び出し用。
    """
    from shimai.cli import main as cli_main

    cli_main()
