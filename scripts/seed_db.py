from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "scholax"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from scholax.database.bootstrap import ensure_admin_account
from scholax.main import load_settings


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings = load_settings()

    email = argv[1] if len(argv) > 1 else settings.admin_email
    if not email:
        print("Usage: python scripts/seed_db.py <admin-email>  (or set ADMIN_EMAIL)")
        return 2

    created = ensure_admin_account(dict(settings.db_config), email)
    print(f"OK: admin account {'created' if created else 'already present'} for {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
