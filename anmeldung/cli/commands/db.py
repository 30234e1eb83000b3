"""データベース初期化コマンド"""

import click

from anmeldung.config.settings import DEFAULT_DB_PATH
from anmeldung.db import get_engine, init_db


@click.command("init-db")
@click.option("--db", default=DEFAULT_DB_PATH, type=click.Path(), help="DBファイルパス")
def init_db_command(db: str):
    """テーブルを作成する（既存のテーブルはそのまま）"""
    engine = get_engine(db)
    init_db(engine)
    click.echo(f"データベースを初期化しました: {db}")
