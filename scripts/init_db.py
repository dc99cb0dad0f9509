"""Create tables and seed default categories."""

from book_assets.config import load_config
from book_assets.db.db_init import seed_categories


def main() -> None:
    config = load_config()
    inserted = seed_categories(config.session_factory)
    print(f"Database initialized ({inserted} categories seeded).")


if __name__ == "__main__":
    main()
