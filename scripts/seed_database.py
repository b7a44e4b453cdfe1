"""Seed the survey store from JSON files.

Each file in `database_seeds/` becomes one collection named after the file,
e.g. `database_seeds/priors.json` -> collection `priors`, holding the
`completedParticipants` registry and the `participants` trial sets.

Existing collections are backed up to `database_backups/` before they are
replaced. A registry that already has claimed slots is left alone unless
`--force` is given, so a re-seed can't hand out a used identifier again.

Env:
  MONGO_URI=mongodb://localhost:27017/priors   (required, must name a db)

Example:
    python scripts/seed_database.py
    python scripts/seed_database.py --seeds-dir my_seeds --force
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from bson import json_util
from loguru import logger
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import CollectionInvalid

from priors_survey.core.constants import REGISTRY_PATH
from priors_survey.helpers import database_helpers as dbh
from priors_survey.helpers.logging_helpers import add_console_sink, configure_logger

SEEDS_DIR: Path = Path("database_seeds")
BACKUPS_DIR: Path = Path("database_backups")
SUPPORTED_EXTS = {".json", ".ndjson"}


class SeedConflictError(RuntimeError):
    """Seeding would overwrite a registry that already has claimed slots."""


def backup_root_dir(db_name: str, backups_dir: Path = BACKUPS_DIR) -> Path:
    """Create and return a timestamped backup root directory."""
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    root = backups_dir / f"{db_name}-{ts}"
    root.mkdir(parents=True, exist_ok=True)
    return root


def backup_collection(db: Database, coll_name: str, root: Path) -> Path:
    """Dump an existing collection to NDJSON and return the file path."""
    out_path = root / f"{coll_name}.ndjson"
    with out_path.open("w", encoding="utf-8") as f:
        for doc in db[coll_name].find({}):
            f.write(json_util.dumps(doc))
            f.write("\n")
    return out_path


def load_seed_documents(path: Path) -> List[Dict[str, Any]]:
    """Load documents from a seed file.

    Accepts a JSON array, an object wrapper with a ``documents`` array, or
    newline-delimited JSON.

    Raises:
        ValueError: If the file contents are not usable JSON documents.
    """
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        logger.warning(f"{path} is empty; skipping.")
        return []

    if path.suffix.lower() == ".ndjson":
        docs: List[Dict[str, Any]] = []
        for i, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            obj = json.loads(line)
            if not isinstance(obj, dict):
                raise ValueError(f"Line {i} in {path} is not a JSON object.")
            docs.append(obj)
        return docs

    data = json.loads(text)
    if isinstance(data, dict) and isinstance(data.get("documents"), list):
        data = data["documents"]
    if isinstance(data, list):
        if not all(isinstance(x, dict) for x in data):
            raise ValueError(f"Seed array in {path} must contain only objects.")
        return data
    raise ValueError(
        f"Unsupported JSON structure in {path}. "
        "Expected an array, NDJSON, or an object with 'documents'."
    )


def discover_seed_files(seeds_dir: Path) -> List[Path]:
    """Return supported seed files under ``seeds_dir`` in alphabetical order."""
    return [
        p
        for p in sorted(seeds_dir.iterdir())
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS
    ]


def claimed_slots(db: Database) -> List[str]:
    """Return the identifiers already marked complete in the registry."""
    coll_name, doc_id, field = dbh.split_path(REGISTRY_PATH)
    doc = db[coll_name].find_one({"_id": doc_id}) or {}
    if field:
        for key in field.split("."):
            doc = doc.get(key) or {}
    return sorted(k for k, v in doc.items() if k != "_id" and v is True)


def seed_collection(coll: Collection, docs: Sequence[Dict[str, Any]]) -> int:
    """Replace a collection's contents with the given documents."""
    coll.drop()

    if not docs:
        logger.info(f"Dropped '{coll.name}'; creating empty collection.")
        try:
            coll.database.create_collection(coll.name)
        except CollectionInvalid:
            pass
        return 0

    result = coll.insert_many(list(docs), ordered=False)
    return len(result.inserted_ids)


def seed_database(
    db: Database,
    seed_files: Iterable[Path],
    force: bool = False,
    backups_dir: Path = BACKUPS_DIR,
) -> Dict[str, int]:
    """Seed one collection per seed file and return inserted counts by name.

    Raises:
        SeedConflictError: If the registry collection would be replaced while
            it still has claimed slots and `force` is False.
    """
    seed_files = list(seed_files)
    existing = set(db.list_collection_names())
    registry_coll = dbh.split_path(REGISTRY_PATH)[0]

    if not force and registry_coll in {f.stem for f in seed_files}:
        taken = claimed_slots(db)
        if taken:
            raise SeedConflictError(
                f"Registry already has {len(taken)} claimed slot(s) "
                f"({', '.join(taken)}); rerun with --force to replace it."
            )

    backup_root: Path | None = None
    counts: Dict[str, int] = {}
    for f in seed_files:
        collection_name = f.stem

        if collection_name in existing:
            if backup_root is None:
                backup_root = backup_root_dir(db.name, backups_dir)
                logger.info(f"Backing up existing collections to {backup_root}")
            backup_collection(db, collection_name, backup_root)

        logger.info(f"Seeding collection '{collection_name}' from {f.name}")
        docs = load_seed_documents(f)
        counts[collection_name] = seed_collection(db[collection_name], docs)
        logger.info(
            f"Inserted {counts[collection_name]} document(s) into '{collection_name}'"
        )
    return counts


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the seeder."""
    parser = argparse.ArgumentParser(description="Seed the survey store")
    parser.add_argument(
        "--seeds-dir",
        type=Path,
        default=SEEDS_DIR,
        help="Directory of *.json / *.ndjson seed files (default: database_seeds).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace the registry even if it has claimed slots.",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Run the seeding process."""
    args = parse_args()
    configure_logger(source="seed")
    add_console_sink(1)

    if not args.seeds_dir.is_dir():
        raise SystemExit(f"Seeds directory not found: {args.seeds_dir}")

    seed_paths = discover_seed_files(args.seeds_dir)
    if not seed_paths:
        raise SystemExit(
            f"No seed files found in {args.seeds_dir} (expected *.json or *.ndjson)."
        )

    db = dbh.get_db()
    logger.info(f"Seeding database '{db.name}'...")
    try:
        seed_database(db, seed_paths, force=args.force)
    except SeedConflictError as e:
        raise SystemExit(str(e)) from e
    logger.info("Done.")


if __name__ == "__main__":
    main()
