"""SQLite store for providers, categories, business hours, reviews and favorites.

load_providers() assembles the flat Provider snapshot the discovery query
consumes; ratings are aggregated from reviews at read time.
"""

import logging
import sqlite3
from datetime import datetime, time
from pathlib import Path

from src.core.schemas import BusinessHoursEntry, Category, Provider, as_utc, utc_now

logger = logging.getLogger(__name__)

_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id      TEXT PRIMARY KEY,
    name    TEXT NOT NULL,
    slug    TEXT NOT NULL UNIQUE
);
"""

_PROVIDERS_TABLE = """
CREATE TABLE IF NOT EXISTS providers (
    id              TEXT    PRIMARY KEY,
    name            TEXT    NOT NULL,
    description     TEXT    NOT NULL DEFAULT '',
    city            TEXT    NOT NULL DEFAULT '',
    neighborhood    TEXT    NOT NULL DEFAULT '',
    state           TEXT,
    latitude        REAL,
    longitude       REAL,
    whatsapp        TEXT    NOT NULL DEFAULT '',
    is_active       INTEGER NOT NULL DEFAULT 1,
    is_verified     INTEGER NOT NULL DEFAULT 0,
    created_at      TEXT    NOT NULL
);
"""

_PROVIDER_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS provider_categories (
    provider_id     TEXT    NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
    category_id     TEXT    NOT NULL REFERENCES categories(id),
    position        INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (provider_id, category_id)
);
"""

_BUSINESS_HOURS_TABLE = """
CREATE TABLE IF NOT EXISTS business_hours (
    provider_id     TEXT    NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
    day_of_week     INTEGER NOT NULL CHECK (day_of_week BETWEEN 0 AND 6),
    open_time       TEXT,
    close_time      TEXT,
    is_closed       INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (provider_id, day_of_week)
);
"""

_REVIEWS_TABLE = """
CREATE TABLE IF NOT EXISTS reviews (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    provider_id     TEXT    NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
    client_id       TEXT    NOT NULL,
    rating          INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
    comment         TEXT,
    created_at      TEXT    NOT NULL,
    UNIQUE(provider_id, client_id)
);
"""

_FAVORITES_TABLE = """
CREATE TABLE IF NOT EXISTS favorites (
    user_id         TEXT NOT NULL,
    provider_id     TEXT NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
    created_at      TEXT NOT NULL,
    PRIMARY KEY (user_id, provider_id)
);
"""

_PROVIDER_COLUMNS = """
    p.id, p.name, p.description, p.city, p.neighborhood, p.state,
    p.latitude, p.longitude, p.whatsapp, p.is_active, p.is_verified, p.created_at,
    (SELECT ROUND(AVG(r.rating), 1) FROM reviews r WHERE r.provider_id = p.id) AS average_rating,
    (SELECT COUNT(*) FROM reviews r WHERE r.provider_id = p.id) AS review_count
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    for ddl in (
        _CATEGORIES_TABLE,
        _PROVIDERS_TABLE,
        _PROVIDER_CATEGORIES_TABLE,
        _BUSINESS_HOURS_TABLE,
        _REVIEWS_TABLE,
        _FAVORITES_TABLE,
    ):
        conn.execute(ddl)
    conn.commit()
    return conn


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def upsert_category(conn: sqlite3.Connection, category: Category) -> None:
    """Insert or update a category by id.

    Raises:
        ValueError: If the slug already belongs to a category with another id.
    """
    try:
        conn.execute(
            """
            INSERT INTO categories (id, name, slug) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET name = excluded.name, slug = excluded.slug
            """,
            (category.id, category.name, category.slug),
        )
    except sqlite3.IntegrityError as e:
        conn.rollback()
        msg = f"Category slug '{category.slug}' is already used by another category"
        raise ValueError(msg) from e
    conn.commit()


def upsert_provider(conn: sqlite3.Connection, provider: Provider) -> None:
    """Insert or update a provider with its categories and business hours.

    average_rating and review_count are ignored: they are derived from reviews.
    """
    conn.execute(
        """
        INSERT INTO providers
            (id, name, description, city, neighborhood, state, latitude, longitude,
             whatsapp, is_active, is_verified, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            name = excluded.name,
            description = excluded.description,
            city = excluded.city,
            neighborhood = excluded.neighborhood,
            state = excluded.state,
            latitude = excluded.latitude,
            longitude = excluded.longitude,
            whatsapp = excluded.whatsapp,
            is_active = excluded.is_active,
            is_verified = excluded.is_verified
        """,
        (
            provider.id,
            provider.name,
            provider.description,
            provider.city,
            provider.neighborhood,
            provider.state,
            provider.latitude,
            provider.longitude,
            provider.whatsapp,
            int(provider.is_active),
            int(provider.is_verified),
            provider.created_at.isoformat(),
        ),
    )
    for category in provider.categories:
        upsert_category(conn, category)
    set_provider_categories(conn, provider.id, [c.id for c in provider.categories])
    set_business_hours(conn, provider.id, provider.business_hours)
    logger.debug("Upserted provider '%s'", provider.id)


def set_provider_categories(
    conn: sqlite3.Connection,
    provider_id: str,
    category_ids: list[str],
) -> None:
    """Replace a provider's categories, keeping the given order."""
    conn.execute("DELETE FROM provider_categories WHERE provider_id = ?", (provider_id,))
    conn.executemany(
        "INSERT INTO provider_categories (provider_id, category_id, position) VALUES (?, ?, ?)",
        [(provider_id, cid, pos) for pos, cid in enumerate(dict.fromkeys(category_ids))],
    )
    conn.commit()


def set_business_hours(
    conn: sqlite3.Connection,
    provider_id: str,
    hours: list[BusinessHoursEntry],
) -> None:
    """Replace a provider's weekly hours."""
    conn.execute("DELETE FROM business_hours WHERE provider_id = ?", (provider_id,))
    conn.executemany(
        """
        INSERT INTO business_hours (provider_id, day_of_week, open_time, close_time, is_closed)
        VALUES (?, ?, ?, ?, ?)
        """,
        [
            (
                provider_id,
                h.day_of_week,
                h.open_time.isoformat() if h.open_time else None,
                h.close_time.isoformat() if h.close_time else None,
                int(h.is_closed),
            )
            for h in hours
        ],
    )
    conn.commit()


def add_review(
    conn: sqlite3.Connection,
    provider_id: str,
    client_id: str,
    rating: int,
    comment: str | None = None,
    created_at: datetime | None = None,
) -> bool:
    """Store a review.

    Returns False if this client already reviewed the provider or the provider
    does not exist.
    """
    if not 1 <= rating <= 5:
        msg = f"rating must be between 1 and 5, got {rating}"
        raise ValueError(msg)
    try:
        conn.execute(
            """
            INSERT INTO reviews (provider_id, client_id, rating, comment, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (provider_id, client_id, rating, comment, as_utc(created_at or utc_now()).isoformat()),
        )
        conn.commit()
        return True
    except sqlite3.IntegrityError:
        return False


def add_favorite(conn: sqlite3.Connection, user_id: str, provider_id: str) -> bool:
    """Mark a provider as favorite. Returns False if it already was."""
    try:
        conn.execute(
            "INSERT INTO favorites (user_id, provider_id, created_at) VALUES (?, ?, ?)",
            (user_id, provider_id, utc_now().isoformat()),
        )
        conn.commit()
        return True
    except sqlite3.IntegrityError:
        return False


def remove_favorite(conn: sqlite3.Connection, user_id: str, provider_id: str) -> bool:
    cursor = conn.execute(
        "DELETE FROM favorites WHERE user_id = ? AND provider_id = ?",
        (user_id, provider_id),
    )
    conn.commit()
    return cursor.rowcount > 0


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def has_user_reviewed_provider(conn: sqlite3.Connection, provider_id: str, client_id: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM reviews WHERE provider_id = ? AND client_id = ? LIMIT 1",
        (provider_id, client_id),
    ).fetchone()
    return row is not None


def get_provider_reviews(conn: sqlite3.Connection, provider_id: str) -> list[sqlite3.Row]:
    """Reviews for a provider, newest first."""
    return conn.execute(
        """
        SELECT id, provider_id, client_id, rating, comment, created_at
        FROM reviews WHERE provider_id = ?
        ORDER BY created_at DESC, id DESC
        """,
        (provider_id,),
    ).fetchall()


def get_user_favorites(conn: sqlite3.Connection, user_id: str) -> list[str]:
    """Favorite provider ids for a user, most recently added first."""
    rows = conn.execute(
        "SELECT provider_id FROM favorites WHERE user_id = ? ORDER BY created_at DESC",
        (user_id,),
    ).fetchall()
    return [row["provider_id"] for row in rows]


def get_cities(conn: sqlite3.Connection) -> list[str]:
    """Distinct non-empty cities of active providers, sorted."""
    rows = conn.execute(
        "SELECT DISTINCT city FROM providers WHERE is_active = 1 AND city != '' ORDER BY city"
    ).fetchall()
    return [row["city"] for row in rows]


def load_providers(conn: sqlite3.Connection) -> list[Provider]:
    """Assemble the flat provider snapshot (inactive providers included)."""
    rows = conn.execute(f"SELECT {_PROVIDER_COLUMNS} FROM providers p ORDER BY p.id").fetchall()
    categories = _categories_by_provider(conn)
    hours = _hours_by_provider(conn)
    return [_row_to_provider(row, categories, hours) for row in rows]


def get_provider(conn: sqlite3.Connection, provider_id: str) -> Provider | None:
    row = conn.execute(
        f"SELECT {_PROVIDER_COLUMNS} FROM providers p WHERE p.id = ?",
        (provider_id,),
    ).fetchone()
    if row is None:
        return None
    return _row_to_provider(
        row,
        _categories_by_provider(conn, provider_id),
        _hours_by_provider(conn, provider_id),
    )


def _categories_by_provider(
    conn: sqlite3.Connection,
    provider_id: str | None = None,
) -> dict[str, list[Category]]:
    sql = """
        SELECT pc.provider_id, c.id, c.name, c.slug
        FROM provider_categories pc JOIN categories c ON c.id = pc.category_id
    """
    params: tuple[str, ...] = ()
    if provider_id is not None:
        sql += " WHERE pc.provider_id = ?"
        params = (provider_id,)
    sql += " ORDER BY pc.provider_id, pc.position"
    result: dict[str, list[Category]] = {}
    for row in conn.execute(sql, params):
        result.setdefault(row["provider_id"], []).append(
            Category(id=row["id"], name=row["name"], slug=row["slug"])
        )
    return result


def _hours_by_provider(
    conn: sqlite3.Connection,
    provider_id: str | None = None,
) -> dict[str, list[BusinessHoursEntry]]:
    sql = "SELECT provider_id, day_of_week, open_time, close_time, is_closed FROM business_hours"
    params: tuple[str, ...] = ()
    if provider_id is not None:
        sql += " WHERE provider_id = ?"
        params = (provider_id,)
    sql += " ORDER BY provider_id, day_of_week"
    result: dict[str, list[BusinessHoursEntry]] = {}
    for row in conn.execute(sql, params):
        result.setdefault(row["provider_id"], []).append(
            BusinessHoursEntry(
                day_of_week=row["day_of_week"],
                open_time=_parse_time(row["open_time"]),
                close_time=_parse_time(row["close_time"]),
                is_closed=bool(row["is_closed"]),
            )
        )
    return result


def _row_to_provider(
    row: sqlite3.Row,
    categories: dict[str, list[Category]],
    hours: dict[str, list[BusinessHoursEntry]],
) -> Provider:
    review_count = row["review_count"]
    return Provider(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        city=row["city"],
        neighborhood=row["neighborhood"],
        state=row["state"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        whatsapp=row["whatsapp"],
        categories=categories.get(row["id"], []),
        is_active=bool(row["is_active"]),
        is_verified=bool(row["is_verified"]),
        average_rating=row["average_rating"] if review_count else None,
        review_count=review_count,
        created_at=datetime.fromisoformat(row["created_at"]),
        business_hours=hours.get(row["id"], []),
    )


def _parse_time(value: str | None) -> time | None:
    return time.fromisoformat(value) if value else None
