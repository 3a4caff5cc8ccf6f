"""
db.py — PostgreSQL database layer.

Handles connection, table creation, and the two queries the bot needs:
a conditional insert (one log per user per day) and a per-user history read.
"""

import logging
import os
from datetime import date
from typing import List

import psycopg2
from psycopg2.extras import RealDictCursor

from logbot.models import LogEntry

logger = logging.getLogger(__name__)

# SQL for table creation
CREATE_TABLES = """
CREATE TABLE IF NOT EXISTS daily_logs (
    user_id TEXT NOT NULL,
    log_date DATE NOT NULL,
    message TEXT NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    PRIMARY KEY (user_id, log_date)
);
"""


class StoreError(Exception):
    """Any failure talking to the database."""


def get_connection():
    """Get a new database connection from DATABASE_URL env var."""
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        raise StoreError("DATABASE_URL environment variable not set")
    try:
        return psycopg2.connect(database_url)
    except psycopg2.Error as e:
        raise StoreError(f"Could not connect to database: {e}") from e


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(CREATE_TABLES)
        conn.commit()
        logger.info("Database tables initialized.")
    except psycopg2.Error as e:
        raise StoreError(f"Table creation failed: {e}") from e
    finally:
        conn.close()


def insert_log(user_id: str, log_date: date, message: str) -> bool:
    """
    Insert a log unless one already exists for (user_id, log_date).

    The primary key makes this a single atomic check-and-write, so two
    concurrent submissions for the same day cannot both succeed.

    Returns:
        True if the row was written, False if the day was already logged.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(
                """INSERT INTO daily_logs (user_id, log_date, message)
                   VALUES (%s, %s, %s)
                   ON CONFLICT (user_id, log_date) DO NOTHING""",
                (user_id, log_date, message),
            )
            inserted = cur.rowcount == 1
        conn.commit()
        if inserted:
            logger.info(f"Log saved for user {user_id} on {log_date}")
        else:
            logger.debug(f"User {user_id} already logged {log_date}")
        return inserted
    except psycopg2.Error as e:
        conn.rollback()
        raise StoreError(f"Insert failed: {e}") from e
    finally:
        conn.close()


def fetch_history(user_id: str) -> List[LogEntry]:
    """Get all logs for a user, oldest first."""
    conn = get_connection()
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                """SELECT user_id, log_date, message FROM daily_logs
                   WHERE user_id = %s ORDER BY log_date ASC""",
                (user_id,),
            )
            rows = cur.fetchall()
    except psycopg2.Error as e:
        raise StoreError(f"History query failed: {e}") from e
    finally:
        conn.close()

    return [LogEntry(user_id=row["user_id"], log_date=row["log_date"], message=row["message"]) for row in rows]
