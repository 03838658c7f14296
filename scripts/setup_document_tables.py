# =============================================================================
# scripts/setup_document_tables.py
# Create / check the GreenMaster document tables in Supabase
# =============================================================================
"""
Every collection lives in its own table with the same layout:

    id          text primary key
    data        jsonb
    updated_at  timestamptz

Usage:
    python scripts/setup_document_tables.py            # print SQL, check tables
    python scripts/setup_document_tables.py --seed     # also seed empty tables

Prerequisites:
    - Configure .streamlit/secrets.toml with Supabase credentials
      (or set SUPABASE_URL and SUPABASE_KEY)
    - Run the printed SQL in the Supabase SQL Editor
"""

import argparse
import sys
import tomllib
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from greenmaster_core.config import load_settings
from greenmaster_core.errors import GreenMasterError
from greenmaster_core.models import TRACKED_COLLECTIONS, seed_documents
from greenmaster_core.store import SupabaseDocumentStore, create_supabase_client

TABLE_SQL = """\
create table if not exists public.{table} (
    id text primary key,
    data jsonb not null default '{{}}'::jsonb,
    updated_at timestamptz not null default now()
);
create index if not exists {table}_updated_at_idx on public.{table} (updated_at);
"""


def load_secrets_toml() -> dict:
    """Load secret tables from .streamlit/secrets.toml ({} if absent)."""
    secrets_path = project_root / ".streamlit" / "secrets.toml"
    if not secrets_path.exists():
        return {}
    with open(secrets_path, "rb") as f:
        return tomllib.load(f)


def create_table_sql() -> str:
    return "\n".join(TABLE_SQL.format(table=name) for name in TRACKED_COLLECTIONS)


def check_tables(store: SupabaseDocumentStore) -> list:
    """Return the collections whose table cannot be read."""
    print("\n[2/3] Checking tables...")
    missing = []
    for name in TRACKED_COLLECTIONS:
        try:
            rows = store.fetch_all(name)
            print(f"      {name:<12} OK ({len(rows)} documents)")
        except GreenMasterError as e:
            print(f"      {name:<12} MISSING ({e.message})")
            missing.append(name)
    return missing


def seed(store: SupabaseDocumentStore) -> None:
    print("\n[3/3] Seeding empty collections...")
    for name, documents in seed_documents().items():
        seeded = store.seed_if_empty(name, documents)
        print(f"      {name:<12} {'seeded ' + str(len(documents)) if seeded else 'already has data'}")


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--seed", action="store_true", help="seed empty collections with sample data")
    args = parser.parse_args()

    print("=" * 60)
    print("GreenMaster - Supabase document tables")
    print("=" * 60)

    print("\n[1/3] SQL (run in the Supabase SQL Editor):\n")
    print(create_table_sql())

    settings = load_settings(secrets=load_secrets_toml())
    if not settings.remote_enabled:
        print("ERROR: Missing Supabase credentials.")
        print()
        print("Option 1: Configure .streamlit/secrets.toml:")
        print('  [supabase]')
        print('  url = "https://your-project.supabase.co"')
        print('  key = "your-anon-key"')
        print()
        print("Option 2: Set environment variables:")
        print("  SUPABASE_URL and SUPABASE_KEY")
        sys.exit(1)

    print(f"Using Supabase URL: {settings.supabase_url[:40]}...")
    store = SupabaseDocumentStore(create_supabase_client(settings), start_refresher=False)

    missing = check_tables(store)
    if missing:
        print(f"\nCreate the missing tables first: {', '.join(missing)}")
        sys.exit(1)

    if args.seed:
        seed(store)

    print("\nDone.")


if __name__ == "__main__":
    main()
