from __future__ import annotations

import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Tuple, Optional, Dict, Any


def get_db_path() -> str:
    return os.getenv("DB_PATH", "./data/lottery.sqlite")


def now_iso() -> str:
    # Microsecond resolution keeps lexical order equal to insertion order.
    return datetime.now().isoformat(timespec="microseconds")


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


def init_db() -> None:
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)
    conn = connect()
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS past_results (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                numbers TEXT NOT NULL,         -- comma-joined, sorted
                bonus_number INTEGER NOT NULL,
                date TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS predictions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                numbers TEXT NOT NULL,
                bonus_number INTEGER NOT NULL,
                source TEXT NOT NULL,          -- random | machine_learning | neural_network
                date TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS model_accuracy (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                model_name TEXT NOT NULL,
                accuracy REAL NOT NULL,
                date TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS detected_patterns (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                pattern_description TEXT NOT NULL,
                confidence REAL NOT NULL,
                date TEXT NOT NULL
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


def _join(numbers: Iterable[int]) -> str:
    return ",".join(str(n) for n in numbers)


def _rows(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    return [dict(row) for row in cur.fetchall()]


# ===== PAST RESULTS =====

def insert_past_result(numbers: List[int], bonus_number: int) -> int:
    conn = connect()
    try:
        cur = conn.execute(
            "INSERT INTO past_results (numbers, bonus_number, date) VALUES (?, ?, ?)",
            (_join(numbers), int(bonus_number), now_iso()),
        )
        conn.commit()
        return cur.lastrowid
    finally:
        conn.close()


def insert_past_results(rows: Iterable[Tuple[List[int], int]]) -> int:
    """Bulk insert (numbers, bonus) pairs. Each row gets its own timestamp."""
    to_insert = [(_join(nums), int(bonus), now_iso()) for nums, bonus in rows]
    conn = connect()
    try:
        cur = conn.cursor()
        cur.executemany(
            "INSERT INTO past_results (numbers, bonus_number, date) VALUES (?, ?, ?)",
            to_insert,
        )
        conn.commit()
        return len(to_insert)
    finally:
        conn.close()


def get_past_results(limit: Optional[int] = None, newest_first: bool = True) -> List[Dict[str, Any]]:
    order = "DESC" if newest_first else "ASC"
    conn = connect()
    try:
        if limit is None:
            cur = conn.execute(
                f"SELECT id, numbers, bonus_number, date FROM past_results ORDER BY id {order}"
            )
        else:
            cur = conn.execute(
                f"SELECT id, numbers, bonus_number, date FROM past_results ORDER BY id {order} LIMIT ?",
                (limit,),
            )
        return _rows(cur)
    finally:
        conn.close()


def count_past_results() -> int:
    conn = connect()
    try:
        row = conn.execute("SELECT COUNT(*) FROM past_results").fetchone()
        return row[0] if row else 0
    finally:
        conn.close()


# ===== PREDICTIONS =====

def insert_prediction(numbers: List[int], bonus_number: int, source: str) -> Dict[str, Any]:
    date = now_iso()
    conn = connect()
    try:
        cur = conn.execute(
            "INSERT INTO predictions (numbers, bonus_number, source, date) VALUES (?, ?, ?, ?)",
            (_join(numbers), int(bonus_number), source, date),
        )
        conn.commit()
        return {
            "id": cur.lastrowid,
            "numbers": list(numbers),
            "bonus_number": int(bonus_number),
            "source": source,
            "date": date,
        }
    finally:
        conn.close()


def get_predictions(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    conn = connect()
    try:
        if limit is None:
            cur = conn.execute(
                "SELECT id, numbers, bonus_number, source, date FROM predictions ORDER BY id DESC"
            )
        else:
            cur = conn.execute(
                "SELECT id, numbers, bonus_number, source, date FROM predictions ORDER BY id DESC LIMIT ?",
                (limit,),
            )
        return _rows(cur)
    finally:
        conn.close()


# ===== MODEL ACCURACY =====

def insert_model_accuracy(model_name: str, accuracy: float) -> int:
    conn = connect()
    try:
        cur = conn.execute(
            "INSERT INTO model_accuracy (model_name, accuracy, date) VALUES (?, ?, ?)",
            (model_name, float(accuracy), now_iso()),
        )
        conn.commit()
        return cur.lastrowid
    finally:
        conn.close()


def get_model_accuracy(limit: int = 50) -> List[Dict[str, Any]]:
    conn = connect()
    try:
        cur = conn.execute(
            "SELECT id, model_name, accuracy, date FROM model_accuracy ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return _rows(cur)
    finally:
        conn.close()


# ===== DETECTED PATTERNS =====

def insert_pattern(description: str, confidence: float) -> Dict[str, Any]:
    date = now_iso()
    conn = connect()
    try:
        cur = conn.execute(
            "INSERT INTO detected_patterns (pattern_description, confidence, date) VALUES (?, ?, ?)",
            (description, float(confidence), date),
        )
        conn.commit()
        return {
            "id": cur.lastrowid,
            "pattern_description": description,
            "confidence": float(confidence),
            "date": date,
        }
    finally:
        conn.close()


def replace_patterns(patterns: List[Dict[str, Any]]) -> int:
    """Swap the stored pattern set for a freshly detected one in one transaction."""
    date = now_iso()
    conn = connect()
    try:
        conn.execute("DELETE FROM detected_patterns")
        conn.executemany(
            "INSERT INTO detected_patterns (pattern_description, confidence, date) VALUES (?, ?, ?)",
            [(p["description"], float(p["confidence"]), date) for p in patterns],
        )
        conn.commit()
        return len(patterns)
    finally:
        conn.close()


def get_patterns(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    conn = connect()
    try:
        if limit is None:
            cur = conn.execute(
                "SELECT id, pattern_description, confidence, date FROM detected_patterns ORDER BY id DESC"
            )
        else:
            cur = conn.execute(
                "SELECT id, pattern_description, confidence, date FROM detected_patterns ORDER BY id DESC LIMIT ?",
                (limit,),
            )
        return _rows(cur)
    finally:
        conn.close()
