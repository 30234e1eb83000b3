"""編集トークンによる申込照会コマンド"""

import click

from anmeldung.config.settings import DEFAULT_DB_PATH
from anmeldung.db import get_engine, get_session, init_db
from anmeldung.errors import NotFoundError
from anmeldung.repositories import (
    SQLAlchemyRegistrationRepository,
    SQLAlchemySeasonRepository,
)
from anmeldung.services.lifecycle import RegistrationLifecycle
from anmeldung.services.notifier import HttpEditLinkNotifier, build_edit_link


@click.command()
@click.argument("token")
@click.option("--db", default=DEFAULT_DB_PATH, type=click.Path(), help="DBファイルパス")
def lookup(token: str, db: str):
    """編集トークンから申込内容と状態を表示"""
    engine = get_engine(db)
    init_db(engine)

    with get_session(engine) as session:
        seasons = SQLAlchemySeasonRepository(session)
        lifecycle = RegistrationLifecycle(
            SQLAlchemyRegistrationRepository(session), seasons, HttpEditLinkNotifier()
        )
        try:
            registration, contact, entries = lifecycle.load_for_edit(token)
        except NotFoundError as e:
            raise click.ClickException(str(e)) from e

        state = lifecycle.state_of(token)
        season = seasons.get(registration.season_id) if registration.season_id else None

        click.echo(f"申込ID: {registration.id}")
        click.echo(f"状態: {state.value}")
        if season is not None:
            click.echo(f"シーズン: {season.year}（申込締切 {season.signup_deadline}）")
        click.echo(f"編集リンク: {build_edit_link(token, season.year if season else None)}")
        click.echo("")
        click.echo(f"担当者: {contact.responsible_name}")
        click.echo(f"クラブ: {contact.club_name or '-'}")
        click.echo(f"メール: {contact.email}")
        click.echo(f"電話: {contact.phone}")
        click.echo("")
        click.echo(f"参加者: {len(entries)}人")
        for index, entry in enumerate(entries, start=1):
            click.echo(
                f"  {index}. {entry.first_name} {entry.last_name} "
                f"({entry.birth_year}, {entry.gender})"
            )
