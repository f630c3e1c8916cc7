# -*- coding: utf-8 -*-
from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..log import log

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK (length(name) <= 100),
    credit INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK (length(name) <= 100),
    image TEXT NOT NULL DEFAULT '' CHECK (length(image) <= 500),
    value INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS inventories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    item_id INTEGER NOT NULL REFERENCES items(id) ON DELETE CASCADE,
    quantity INTEGER NOT NULL DEFAULT 1,
    UNIQUE (user_id, item_id)
);
"""

_SEED_USERS = [
    (1, "Alice", 100),
    (2, "Bob", 75),
    (3, "Charlie", 150),
]

_SEED_ITEMS = [
    (1, "Fish Treat", "\U0001F41F", 10),
    (2, "Chicken Treat", "\U0001F357", 15),
    (3, "Milk", "\U0001F95B", 5),
    (4, "Yarn Ball", "\U0001F9F6", 20),
    (5, "Catnip", "\U0001F33F", 25),
    (6, "Toy Mouse", "\U0001F42D", 12),
]

# (id, user_id, item_id, quantity)
_SEED_INVENTORY = [
    (1, 1, 1, 3),
    (2, 1, 3, 2),
    (3, 1, 4, 1),
    (4, 2, 2, 2),
    (5, 2, 5, 1),
    (6, 3, 1, 5),
    (7, 3, 6, 3),
]

_SEED_POWERS = [
    {"id": 1, "name": "Teleportation", "description": "Instantly travel to any location", "power_level": 95},
    {"id": 2, "name": "Time Manipulation", "description": "Control the flow of time", "power_level": 100},
    {"id": 3, "name": "Space Bending", "description": "Bend space to your will", "power_level": 88},
    {"id": 4, "name": "Reality Shift", "description": "Alter the fabric of reality", "power_level": 92},
]


class StoreError(RuntimeError):
    pass


@dataclass
class PowerStore:
    """Warp powers live in memory only; ids continue from the highest one."""

    powers: List[Dict[str, Any]] = field(default_factory=lambda: [dict(p) for p in _SEED_POWERS])
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(p) for p in self.powers]

    def get(self, power_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            for p in self.powers:
                if p["id"] == power_id:
                    return dict(p)
        return None

    def create(self, name: str, description: str, power_level: int) -> Dict[str, Any]:
        with self._lock:
            new_id = max((p["id"] for p in self.powers), default=0) + 1
            power = {"id": new_id, "name": name, "description": description, "power_level": int(power_level)}
            self.powers.append(power)
            return dict(power)


class InventoryStore:
    """Users, items and who owns how many of what, in sqlite.

    One connection shared across request threads, serialised by a lock.
    ``":memory:"`` gives a throwaway database (tests, demos).
    """

    def __init__(self, path: Union[str, Path] = ":memory:", *, seed: bool = True):
        self.path = str(path)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        with self._lock:
            self._conn.executescript(_SCHEMA)
            if seed:
                self._seed()
            self._conn.commit()

    def _seed(self) -> None:
        cur = self._conn.execute("SELECT COUNT(*) FROM users")
        if cur.fetchone()[0]:
            return
        self._conn.executemany("INSERT INTO users (id, name, credit) VALUES (?, ?, ?)", _SEED_USERS)
        self._conn.executemany("INSERT INTO items (id, name, image, value) VALUES (?, ?, ?, ?)", _SEED_ITEMS)
        self._conn.executemany(
            "INSERT INTO inventories (id, user_id, item_id, quantity) VALUES (?, ?, ?, ?)", _SEED_INVENTORY
        )
        log(f"Seeded inventory database {self.path}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ----------------- users -----------------

    def _inventory_rows(self, user_id: int) -> List[Dict[str, Any]]:
        rows = self._conn.execute(
            "SELECT id, user_id, item_id, quantity FROM inventories WHERE user_id = ? ORDER BY id",
            (user_id,),
        ).fetchall()
        return [dict(r) for r in rows]

    def _user_dict(self, row: sqlite3.Row) -> Dict[str, Any]:
        out = dict(row)
        out["inventories"] = self._inventory_rows(out["id"])
        return out

    def list_users(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._conn.execute("SELECT id, name, credit FROM users ORDER BY id").fetchall()
            return [self._user_dict(r) for r in rows]

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._conn.execute("SELECT id, name, credit FROM users WHERE id = ?", (user_id,)).fetchone()
            return self._user_dict(row) if row else None

    def user_inventory(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        """Inventory entries joined with their items; None for an unknown user."""
        with self._lock:
            if self._conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone() is None:
                return None
            rows = self._conn.execute(
                """
                SELECT inv.id, inv.user_id, inv.item_id, inv.quantity,
                       it.name AS item_name, it.image AS item_image, it.value AS item_value
                FROM inventories inv JOIN items it ON it.id = inv.item_id
                WHERE inv.user_id = ? ORDER BY inv.id
                """,
                (user_id,),
            ).fetchall()
            return [dict(r) for r in rows]

    def create_user(self, name: str, credit: int) -> Dict[str, Any]:
        with self._lock:
            try:
                cur = self._conn.execute("INSERT INTO users (name, credit) VALUES (?, ?)", (name, credit))
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise StoreError(str(e)) from e
            row = self._conn.execute("SELECT id, name, credit FROM users WHERE id = ?", (cur.lastrowid,)).fetchone()
            return self._user_dict(row)

    def update_user(self, user_id: int, name: str, credit: int) -> bool:
        with self._lock:
            try:
                cur = self._conn.execute(
                    "UPDATE users SET name = ?, credit = ? WHERE id = ?", (name, credit, user_id)
                )
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise StoreError(str(e)) from e
            return cur.rowcount > 0

    def delete_user(self, user_id: int) -> bool:
        with self._lock:
            cur = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            self._conn.commit()
            return cur.rowcount > 0

    # ----------------- items -----------------

    def list_items(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._conn.execute("SELECT id, name, image, value FROM items ORDER BY id").fetchall()
            return [dict(r) for r in rows]

    def get_item(self, item_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._conn.execute("SELECT id, name, image, value FROM items WHERE id = ?", (item_id,)).fetchone()
            return dict(row) if row else None

    def create_item(self, name: str, image: str, value: int) -> Dict[str, Any]:
        with self._lock:
            try:
                cur = self._conn.execute(
                    "INSERT INTO items (name, image, value) VALUES (?, ?, ?)", (name, image, value)
                )
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise StoreError(str(e)) from e
            return {"id": cur.lastrowid, "name": name, "image": image, "value": value}

    def update_item(self, item_id: int, name: str, image: str, value: int) -> bool:
        with self._lock:
            try:
                cur = self._conn.execute(
                    "UPDATE items SET name = ?, image = ?, value = ? WHERE id = ?", (name, image, value, item_id)
                )
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise StoreError(str(e)) from e
            return cur.rowcount > 0

    def delete_item(self, item_id: int) -> bool:
        with self._lock:
            cur = self._conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            self._conn.commit()
            return cur.rowcount > 0
