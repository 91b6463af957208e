# scripts/dev_db_init.py
"""Create the tables and load the demo classes from DevConfig.

    python scripts/dev_db_init.py           # create missing tables + demo data
    python scripts/dev_db_init.py --reset   # drop everything first
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))

from app import create_app, _seed_from_config  # noqa: E402
from extensions import db  # noqa: E402
from blueprints.classes.store import SqlScheduleStore  # noqa: E402

def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables")
    args = parser.parse_args(argv)

    app = create_app("dev")
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
    _seed_from_config(app)
    with app.app_context():
        counts = SqlScheduleStore(db.session).counts()
    print(f"DB initialized: {counts['tutors']} tutors, {counts['classes']} classes, {counts['slots']} slots")

if __name__ == "__main__":
    main()
