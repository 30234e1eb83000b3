"""データベース接続モジュール

SQLAlchemyを使用してSQLiteデータベースへの接続を管理する。
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from anmeldung.models.base import Base


def get_engine(db_path: str) -> Engine:
    """SQLiteデータベースエンジンを作成する

    参加者の連鎖削除のため、接続ごとに外部キー制約を有効にする。

    Args:
        db_path: データベースファイルのパス。
                 ":memory:" を指定するとインメモリDBを作成。

    Returns:
        SQLAlchemyのEngineオブジェクト
    """
    # インメモリDB以外の場合、親ディレクトリを作成
    if db_path != ":memory:":
        parent_dir = Path(db_path).parent
        parent_dir.mkdir(parents=True, exist_ok=True)

    engine = create_engine(f"sqlite:///{db_path}")

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """データベースセッションを取得するコンテキストマネージャー

    正常終了時は自動コミット、例外発生時は自動ロールバックを行う。

    Args:
        engine: SQLAlchemyのEngineオブジェクト

    Yields:
        Sessionオブジェクト

    Example:
        with get_session(engine) as session:
            repository = SQLAlchemyRegistrationRepository(session)
            # 自動コミットされる
    """
    session_factory = sessionmaker(bind=engine)
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """データベースのテーブルを初期化する

    すでにテーブルが存在する場合は何もしない（冪等性あり）。

    Args:
        engine: SQLAlchemyのEngineオブジェクト
    """
    # モデルをメタデータに登録するためのインポート
    import anmeldung.models  # noqa: F401

    Base.metadata.create_all(engine)
