import sqlite3

DATABASE_PATH = 'app.db'


def connect(database_path=DATABASE_PATH):
    """Open a connection that lives for the length of a session"""
    # Flask serves requests from worker threads; callers serialize access.
    conn = sqlite3.connect(database_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn):
    """Create the products table if it does not exist yet"""
    conn.execute('''
        CREATE TABLE IF NOT EXISTS products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            price REAL NOT NULL
        )
    ''')
    conn.commit()
