import os
import sqlite3

# BASE_DIR should be the /api folder, not /api/utils
BASE_DIR = os.path.dirname(os.path.dirname(__file__))

DB_PATH = os.getenv("LECTERN_SCRIPTURE_DB", os.path.join(BASE_DIR, "scripture.db"))

# Seconds a connection waits on another process's write lock
BUSY_TIMEOUT = 30


def get_db(path=None):
    """
    Return a sqlite3 connection to the scripture corpus DB.

    `path` overrides the configured location. Connections are not shared
    between threads; open one per unit of work and close it after.
    """
    conn = sqlite3.connect(path or DB_PATH, timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    return conn
