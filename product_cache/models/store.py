import logging
import sqlite3
from functools import wraps

from product_cache.exceptions import StoreConnectivityError
from product_cache.models.database import DATABASE_PATH, connect, init_db
from product_cache.models.product import Product

logger = logging.getLogger(__name__)


def _wrap_db_errors(action):
    """
    Decorator turning sqlite3 failures into StoreConnectivityError

    Args:
        action: Description of the operation, used in the error message
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except sqlite3.Error as e:
                logger.error(f"Error {action}: {e}")
                raise StoreConnectivityError(f"Error {action}") from e
        return wrapper
    return decorator


def _escape_like(term):
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class ProductStore:
    """CRUD access to the products table over a single connection"""

    def __init__(self, conn):
        self.conn = conn

    @classmethod
    @_wrap_db_errors('opening database connection')
    def open(cls, database_path=DATABASE_PATH):
        conn = connect(database_path)
        try:
            init_db(conn)
        except sqlite3.Error:
            conn.close()
            raise
        logger.debug(f"Connected to {database_path}")
        return cls(conn)

    @_wrap_db_errors('closing database connection')
    def close(self):
        self.conn.close()

    @_wrap_db_errors('creating product')
    def insert(self, name, price):
        """Insert a row and return the generated id"""
        cursor = self.conn.execute(
            'INSERT INTO products (name, price) VALUES (?, ?)',
            (name, price)
        )
        self.conn.commit()
        return cursor.lastrowid

    @_wrap_db_errors('getting product by ID')
    def find_by_id(self, product_id):
        row = self.conn.execute(
            'SELECT id, name, price FROM products WHERE id = ?',
            (product_id,)
        ).fetchone()
        if row is None:
            return None
        return Product.from_row(row)

    @_wrap_db_errors('searching products by name')
    def find_by_name_contains(self, term):
        """Products whose name contains term (SQLite LIKE, case-insensitive for ASCII)"""
        rows = self.conn.execute(
            "SELECT id, name, price FROM products WHERE name LIKE ? ESCAPE '\\' ORDER BY id",
            (f'%{_escape_like(term)}%',)
        ).fetchall()
        return [Product.from_row(row) for row in rows]

    @_wrap_db_errors('getting all products')
    def find_all(self):
        rows = self.conn.execute('SELECT id, name, price FROM products ORDER BY id').fetchall()
        return [Product.from_row(row) for row in rows]

    @_wrap_db_errors('updating product')
    def update(self, product_id, name, price):
        """Returns the number of rows affected"""
        cursor = self.conn.execute(
            'UPDATE products SET name = ?, price = ? WHERE id = ?',
            (name, price, product_id)
        )
        self.conn.commit()
        return cursor.rowcount

    @_wrap_db_errors('deleting product')
    def delete(self, product_id):
        """Returns the number of rows affected"""
        cursor = self.conn.execute('DELETE FROM products WHERE id = ?', (product_id,))
        self.conn.commit()
        return cursor.rowcount
