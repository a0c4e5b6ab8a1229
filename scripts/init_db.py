# scripts/init_db.py
"""
Create the field-service tables.

    python -m scripts.init_db           # create missing tables
    python -m scripts.init_db --reset   # drop everything first
"""

import sys

from fieldservice.db.engine import get_engine
from fieldservice.db.schema import metadata


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    engine = get_engine()
    if "--reset" in argv:
        metadata.drop_all(engine)
    metadata.create_all(engine)
    print(f"DB schema ready ({', '.join(metadata.tables)}).")


if __name__ == "__main__":
    main()
