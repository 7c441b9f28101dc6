"""Management CLI for scoring batches offline.

Usage:
    python -m app.cli evaluate batches.json   # Score a JSON array of batch snapshots
    python -m app.cli policy                  # Show the active scoring policy

``evaluate`` scores every batch against the same timestamp (now, UTC) and
exits with status 1 if the file is unreadable or a batch cannot be scored.
"""

import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.middleware.exceptions import InvalidConfigurationError
from app.schemas.batch import BatchSnapshot
from app.services.evaluation import count_tiers, evaluate_batches
from app.utils.dates import utcnow

logger = logging.getLogger("spoilage.cli")

_snapshot_list = TypeAdapter(list[BatchSnapshot])


def load_snapshots(path: Path) -> list[BatchSnapshot]:
    return _snapshot_list.validate_json(path.read_bytes())


def evaluate(path: str) -> int:
    """Print one line per batch plus a tier summary.  Returns an exit code."""
    try:
        batches = load_snapshots(Path(path))
    except OSError as exc:
        print(f"Cannot read {path}: {exc}")
        return 1
    except ValidationError as exc:
        print(f"Invalid batch file {path}:\n{exc}")
        return 1

    now = utcnow()
    try:
        results = evaluate_batches(batches, now, settings.risk_policy)
    except InvalidConfigurationError as exc:
        print(f"  FAILED: {exc.message}")
        return 1

    for result in results:
        a = result.assessment
        print(
            f"  {a.batch_id:<20} score={a.score:>3}  tier={a.tier.value:<9}"
            f" -> {result.routing.destination_class.value}"
        )

    counts = count_tiers(results)
    summary = ", ".join(f"{tier.value}={n}" for tier, n in counts.items())
    print(f"\n{len(results)} batch(es) evaluated at {now.isoformat()} ({summary})")
    logger.info("Evaluated %d batches from %s", len(results), path)
    return 0


def show_policy() -> int:
    print(json.dumps(settings.risk_policy.model_dump(), indent=2))
    return 0


def main(argv: list[str]) -> int:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cmd = argv[1] if len(argv) > 1 else ""
    if cmd == "evaluate" and len(argv) > 2:
        return evaluate(argv[2])
    if cmd == "policy":
        return show_policy()
    print("Usage: python -m app.cli [evaluate <batches.json>|policy]")
    return 2


if __name__ == "__main__":
    sys.exit(main(sys.argv))
