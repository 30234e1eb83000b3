"""シーズン管理コマンド"""

import click

from anmeldung.config.settings import DEFAULT_DB_PATH
from anmeldung.db import get_engine, get_session, init_db
from anmeldung.models import Season
from anmeldung.repositories import (
    SQLAlchemyRegistrationRepository,
    SQLAlchemySeasonRepository,
)
from anmeldung.services.admin_service import AdminService
from anmeldung.services.season_service import propose_next_season

DATE_FORMAT = click.DateTime(formats=["%Y-%m-%d"])


def resolve_season(repository: SQLAlchemySeasonRepository, year: int | None) -> Season | None:
    """年度指定があればその年度、無ければ有効なシーズンを返す"""
    if year is not None:
        return repository.find_by_year(year)
    return repository.find_active()


def format_season(season: Season) -> str:
    marker = "*" if season.is_active else " "
    return (
        f"{marker} {season.year} 第{season.event_number}回  "
        f"開催日 {season.event_date}  "
        f"申込締切 {season.signup_deadline}  "
        f"支払期限 {season.payment_deadline}"
    )


@click.command()
@click.option("--db", default=DEFAULT_DB_PATH, type=click.Path(), help="DBファイルパス")
def seasons(db: str):
    """シーズン一覧を表示（* は有効なシーズン）"""
    engine = get_engine(db)
    init_db(engine)

    with get_session(engine) as session:
        all_seasons = SQLAlchemySeasonRepository(session).list_all()

        if not all_seasons:
            click.echo("シーズンが登録されていません。")
            return

        for season in all_seasons:
            click.echo(format_season(season))


@click.command("create-season")
@click.option("--db", default=DEFAULT_DB_PATH, type=click.Path(), help="DBファイルパス")
@click.option("--year", type=int, default=None, help="年度（省略時は前シーズン+1）")
@click.option("--event-number", type=int, default=None, help="開催回（省略時は前シーズン+1）")
@click.option("--event-date", type=DATE_FORMAT, default=None, help="開催日（YYYY-MM-DD）")
@click.option("--signup-deadline", type=DATE_FORMAT, default=None, help="申込締切日（YYYY-MM-DD）")
@click.option("--payment-deadline", type=DATE_FORMAT, default=None, help="支払期限（YYYY-MM-DD）")
@click.option("--active", is_flag=True, default=False, help="有効なシーズンとして登録")
def create_season(
    db: str,
    year: int | None,
    event_number: int | None,
    event_date,
    signup_deadline,
    payment_deadline,
    active: bool,
):
    """シーズンを作成する

    省略した項目は直近のシーズンを1年ずらした値で補完する。
    """
    engine = get_engine(db)
    init_db(engine)

    with get_session(engine) as session:
        season_repository = SQLAlchemySeasonRepository(session)
        existing = season_repository.list_all()
        proposal = propose_next_season(existing[0] if existing else None)

        admin = AdminService(SQLAlchemyRegistrationRepository(session), season_repository)
        try:
            season = admin.create_season(
                year=year or proposal.year,
                event_date=event_date.date() if event_date else proposal.event_date,
                signup_deadline=(
                    signup_deadline.date() if signup_deadline else proposal.signup_deadline
                ),
                payment_deadline=(
                    payment_deadline.date() if payment_deadline else proposal.payment_deadline
                ),
                event_number=event_number or proposal.event_number,
                is_active=active,
            )
        except ValueError as e:
            raise click.UsageError(str(e)) from e

        click.echo("シーズンを作成しました")
        click.echo(format_season(season))
