# seed_data.py
"""
Recreate the schema and load demo customers, a technician and jobs.
"""

from scripts.seed import main


if __name__ == "__main__":
    main()
