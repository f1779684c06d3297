"""
Identify one plant photo from the command line.

Usage:
  python -m plant_identifier.scripts.identify_photo [-v] path/to/photo.jpg
  VISION_ADAPTER=mock python -m plant_identifier.scripts.identify_photo photo.jpg

Uses the same settings as the server (.env / environment) and prints the
result as a two-column table. -v dumps the log to stderr.
"""
import asyncio
import sys

from plant_identifier.config import load_settings
from plant_identifier.services.factory import build_orchestrator
from plant_identifier.services.status_store import StatusStore


def _label(key: str) -> str:
    # scientificName -> Scientific Name
    out = "".join(" " + c if c.isupper() else c for c in key).strip()
    return out[:1].upper() + out[1:]


def format_table(record) -> str:
    rows = [(_label(k), v) for k, v in record.to_wire().items()]
    width = max(len(k) for k, _ in rows)
    return "\n".join(f"{k.ljust(width)}  {v}" for k, v in rows)


async def run(path: str, verbose: bool = False) -> int:
    status = StatusStore()
    orch = build_orchestrator(load_settings(), status)
    try:
        picked = await orch.select_path(path)
        res = await orch.identify() if picked.ok else None
    finally:
        await orch.close()

    if verbose:
        print("\n".join(status.logs), file=sys.stderr)
    if res is None:
        print(f"[ERROR] {picked.error_code}: {picked.error}", file=sys.stderr)
        return 1
    if not res.ok:
        print(f"[ERROR] {res.error_code}: {res.error}", file=sys.stderr)
        return 1
    print(format_table(res.record))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = "-v" in args
    args = [a for a in args if a != "-v"]
    if len(args) != 1:
        print(__doc__.strip(), file=sys.stderr)
        return 2
    return asyncio.run(run(args[0], verbose=verbose))


if __name__ == "__main__":
    sys.exit(main())
