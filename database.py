"""
database.py — SQLite storage for crop plans.

Creates the crop_plans table and provides the storage operations the
crop-plan lifecycle relies on: find by id, create, save, delete, list.
Uses WAL mode for concurrent read performance; read-modify-write sequences
run inside transaction() so they execute as one unit.
"""

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import fields
from datetime import datetime

from flask import current_app, has_app_context

from config import DATABASE
from models import CropPlan

PLAN_COLUMNS = [f.name for f in fields(CropPlan) if f.name != 'id']


def get_db_path():
    """Database path: the active app's DATABASE setting, else config.DATABASE."""
    if has_app_context() and current_app.config.get('DATABASE'):
        return current_app.config['DATABASE']
    return DATABASE


def get_db():
    """Get a database connection with WAL mode enabled."""
    db_path = get_db_path()
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create the crop_plans table and its indexes if they don't exist."""
    conn = get_db()
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS crop_plans (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            crop_name TEXT NOT NULL,
            district_name TEXT NOT NULL,
            actual_area_planted_ha REAL NOT NULL CHECK (actual_area_planted_ha > 0),
            planting_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Planted'
                CHECK (status IN ('Planned','Planted','Harvested','Completed','Cancelled')),
            estimated_harvest_date TEXT,
            estimated_yield_kg_per_ha REAL,
            estimated_total_production_kg REAL,
            estimated_price_per_kg_rwf REAL,
            estimated_revenue_rwf REAL,
            actual_harvest_date TEXT,
            actual_yield_kg_per_ha REAL,
            actual_total_production_kg REAL,
            actual_selling_price_per_kg_rwf REAL,
            actual_revenue_rwf REAL,
            harvest_notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_crop_plans_user
        ON crop_plans(user_id)
    """)

    conn.close()


@contextmanager
def transaction():
    """
    Yield a connection inside BEGIN IMMEDIATE; commit on success, roll back on error.

    BEGIN IMMEDIATE takes the write lock up front so a read-validate-write
    sequence cannot interleave with another writer. A BEGIN that fails
    (e.g. "database is locked") propagates as is; there is nothing to roll back.
    """
    conn = get_db()
    try:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.execute("COMMIT")
        except BaseException:
            conn.execute("ROLLBACK")
            raise
    finally:
        conn.close()


@contextmanager
def _connection(conn=None):
    """Reuse the caller's connection, or open (and close) a short-lived one."""
    if conn is not None:
        yield conn
        return
    own = get_db()
    try:
        yield own
    finally:
        own.close()


def _row_to_plan(row):
    if row is None:
        return None
    return CropPlan(**{key: row[key] for key in row.keys()})


def _now():
    return datetime.now().isoformat(timespec='seconds')


def get_crop_plan(plan_id, conn=None):
    """Retrieve a single crop plan by ID, or None."""
    with _connection(conn) as c:
        row = c.execute("SELECT * FROM crop_plans WHERE id = ?", (plan_id,)).fetchone()
    return _row_to_plan(row)


def list_crop_plans(user_id=None):
    """Retrieve crop plans, optionally only one user's, newest first."""
    with _connection() as c:
        if user_id is not None:
            rows = c.execute(
                "SELECT * FROM crop_plans WHERE user_id = ? ORDER BY id DESC",
                (user_id,)
            ).fetchall()
        else:
            rows = c.execute("SELECT * FROM crop_plans ORDER BY id DESC").fetchall()
    return [_row_to_plan(r) for r in rows]


def insert_crop_plan(plan, conn=None):
    """Insert a new crop plan; sets plan.id and timestamps and returns the plan."""
    plan.created_at = plan.updated_at = _now()
    values = [getattr(plan, col) for col in PLAN_COLUMNS]
    placeholders = ', '.join('?' for _ in PLAN_COLUMNS)
    with _connection(conn) as c:
        cursor = c.execute(
            f"INSERT INTO crop_plans ({', '.join(PLAN_COLUMNS)}) VALUES ({placeholders})",
            values
        )
        plan.id = cursor.lastrowid
    return plan


def save_crop_plan(plan, conn=None):
    """Overwrite every column of an existing crop plan."""
    plan.updated_at = _now()
    assignments = ', '.join(f"{col} = ?" for col in PLAN_COLUMNS)
    values = [getattr(plan, col) for col in PLAN_COLUMNS] + [plan.id]
    with _connection(conn) as c:
        c.execute(f"UPDATE crop_plans SET {assignments} WHERE id = ?", values)
    return plan


def delete_crop_plan(plan_id, conn=None):
    """Delete a crop plan. Returns True if a row was removed."""
    with _connection(conn) as c:
        cursor = c.execute("DELETE FROM crop_plans WHERE id = ?", (plan_id,))
    return cursor.rowcount > 0


def count_crop_plans_by_status():
    """Number of crop plans per status."""
    with _connection() as c:
        rows = c.execute(
            "SELECT status, COUNT(*) AS count FROM crop_plans GROUP BY status ORDER BY status"
        ).fetchall()
    return {row['status']: row['count'] for row in rows}
