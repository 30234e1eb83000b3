"""シーズン統計コマンド"""

import click

from anmeldung.cli.commands.season import resolve_season
from anmeldung.config.settings import DEFAULT_DB_PATH
from anmeldung.constants import AGE_CATEGORY_ORDER
from anmeldung.db import get_engine, get_session, init_db
from anmeldung.repositories import (
    SQLAlchemyRegistrationRepository,
    SQLAlchemySeasonRepository,
)
from anmeldung.services.search import filter_registrations
from anmeldung.services.statistics import calculate_statistics, category_label


@click.command()
@click.option("--db", default=DEFAULT_DB_PATH, type=click.Path(), help="DBファイルパス")
@click.option("--year", type=int, default=None, help="年度（省略時は有効なシーズン）")
@click.option("--query", type=str, default="", help="検索語で申込を絞り込む")
def stats(db: str, year: int | None, query: str):
    """シーズンの申込統計を表示"""
    engine = get_engine(db)
    init_db(engine)

    with get_session(engine) as session:
        season = resolve_season(SQLAlchemySeasonRepository(session), year)
        if season is None:
            click.echo("対象のシーズンが見つかりません。")
            return

        registrations = filter_registrations(
            SQLAlchemyRegistrationRepository(session).list_by_season(season.id), query
        )
        result = calculate_statistics(registrations)

        click.echo(f"シーズン {season.year}（第{season.event_number}回）")
        click.echo("=" * 50)
        click.echo(f"  申込数: {result.total_registrations}件")
        click.echo(f"  参加者数: {result.total_participants}人")
        click.echo(f"  クラブ数: {result.unique_clubs}")
        click.echo(
            f"  性別: M {result.by_gender.get('m', 0)}人 / W {result.by_gender.get('w', 0)}人"
        )

        click.echo("")
        click.echo("年齢カテゴリ:")
        for category in AGE_CATEGORY_ORDER:
            click.echo(
                f"  {category_label(category)}: {result.category_total(category)}人 "
                f"(M {result.by_category[f'{category}_m']} / "
                f"W {result.by_category[f'{category}_w']})"
            )
        if result.uncategorized:
            click.echo(f"  カテゴリ外: {result.uncategorized}人")

        if result.by_birth_year:
            click.echo("")
            click.echo("生年別:")
            for birth_year, count in result.by_birth_year.items():
                click.echo(f"  {birth_year}: {count}人")

        if result.clubs:
            click.echo("")
            click.echo("クラブ別申込数:")
            for club in result.clubs:
                click.echo(f"  {club.club}: {club.registrations}件")
