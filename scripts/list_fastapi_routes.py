"""
Write the payout service's HTTP route table to docs/route_inventory.txt.

One tab-separated line per route: methods, path, handler name and the
auth dependency it requires ("admin", "actor" or "-").
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

from fastapi.routing import APIRoute


ROOT = Path(__file__).resolve().parents[1]

# Placeholder settings so the app imports without an env file.
os.environ.setdefault("DATABASE_URL", f"sqlite:///{(ROOT / 'backend' / 'tapify.db').as_posix()}")
os.environ.setdefault("SECRET_KEY", "route-listing-placeholder")
os.environ.setdefault("SKIP_MIGRATIONS", "1")

# Run from the repo root without installing the package.
sys.path.append(str(ROOT / "backend"))

from tapify.main import app  # noqa: E402


def _auth_label(route: APIRoute) -> str:
    names = set()
    stack = list(route.dependant.dependencies)
    while stack:
        dependant = stack.pop()
        call = dependant.call
        names.add(getattr(call, "__qualname__", getattr(call, "__name__", "")))
        stack.extend(dependant.dependencies)
    if any(name.startswith("require_admin") for name in names):
        return "admin"
    if "get_current_actor" in names:
        return "actor"
    return "-"


def iter_routes() -> Iterator[tuple[str, str, str, str]]:
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        methods = ",".join(sorted(m for m in route.methods or [] if m not in {"HEAD", "OPTIONS"})) or "GET"
        yield methods, route.path, route.endpoint.__name__, _auth_label(route)


def write_routes(out_path: Path) -> list[str]:
    lines = ["\t".join(row) for row in iter_routes()]
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return lines


def main() -> None:
    out_path = ROOT / "docs" / "route_inventory.txt"
    lines = write_routes(out_path)
    print(f"Wrote {len(lines)} routes to {out_path}")


if __name__ == "__main__":
    main()
