"""Click CLIメインモジュール"""

import logging

import click


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="詳細ログを表示")
def main(verbose: bool):
    """大会申込の管理CLI"""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# コマンドの登録
from anmeldung.cli.commands.db import init_db_command
from anmeldung.cli.commands.lookup import lookup
from anmeldung.cli.commands.season import create_season, seasons
from anmeldung.cli.commands.stats import stats

main.add_command(init_db_command)
main.add_command(seasons)
main.add_command(create_season)
main.add_command(stats)
main.add_command(lookup)


__all__ = ["main"]
