"""
=========================================================
Command-line demo for SecureDB.
=========================================================

Runs a short insert / select / update / delete round against a 'users'
table (columns: id auto-increment, name, email) in the configured database.

Usage:
    # Use SECUREDB_* settings from the environment / .env
    python main.py --demo

    # Point at another database
    python main.py --demo --url sqlite:///demo.db --verbose

Example:
    >>> from main import run_demo
    >>> summary = run_demo(db)
    >>> summary['deleted']
    1
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from core.config import DatabaseConfig, config
from core.exceptions import SecureDBError
from core.logger import get_logger, setup_logging
from securedb import SecureDB

logger = get_logger(__name__)


def run_demo(db: SecureDB, table: str = 'users') -> Dict[str, Any]:
    """
    Exercise one-shot and fluent calls against table.

    Args:
        db: Connected SecureDB instance
        table: Table with name and email columns and an auto-increment id

    Returns:
        Dictionary with the inserted id, fetched rows and affected counts
    """
    logger.info("Insert:")
    new_id = db.insert(table, {'name': 'Demo User', 'email': 'demo@example.com'})
    logger.info(f"Inserted ID: {new_id}")

    logger.info("Select:")
    rows: List[Dict[str, Any]] = db.from_(table).order_by('id', 'DESC').limit(5).get()
    for row in rows:
        logger.info(f"  {row}")

    logger.info("Update:")
    updated = db.update(table).where({'id': new_id}).change({'name': 'Updated Demo'})
    logger.info(f"Updated rows: {updated}")

    logger.info("Delete:")
    deleted = db.delete(table).where({'id': new_id})
    logger.info(f"Deleted rows: {deleted}")

    return {
        'inserted_id': new_id,
        'rows': rows,
        'updated': updated,
        'deleted': deleted
    }


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="SecureDB demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--demo', action='store_true', help='Run the insert/select/update/delete demo')
    parser.add_argument('--url', help='SQLAlchemy URL overriding SECUREDB_* settings')
    parser.add_argument('--table', default='users', help='Table to use (default: users)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable DEBUG logging')
    args = parser.parse_args(argv)

    setup_logging(log_level='DEBUG' if args.verbose else config.log_level)

    if not args.demo:
        parser.print_help()
        return 0

    db_config = DatabaseConfig(url=args.url) if args.url else config.db

    try:
        with SecureDB.connect(db_config) as db:
            run_demo(db, table=args.table)
    except SecureDBError as e:
        logger.error(f"❌ Demo failed: {e}")
        return 1

    logger.info("✅ Demo completed")
    return 0


if __name__ == '__main__':
    sys.exit(main())
