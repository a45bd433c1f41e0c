from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from featuregraph.config import load_manifest
from featuregraph.core.errors import FeatureGraphError
from featuregraph.core.export import load_snapshot, snapshots_equal, to_dot, to_json, write_snapshot
from featuregraph.core.graph import ModuleGraph


def _build(args: argparse.Namespace) -> ModuleGraph:
    manifest = load_manifest(Path(args.manifest) if args.manifest else None)
    builder = manifest.make_builder()
    return builder.build(args.feature or None)


def _emit(text: str, out: Optional[str]) -> None:
    if out:
        Path(out).write_text(text, encoding="utf-8")
        print(f"Wrote: {out}")
    else:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")


def _cmd_graph(args: argparse.Namespace) -> int:
    _emit(to_json(_build(args)), args.out)
    return 0


def _cmd_dot(args: argparse.Namespace) -> int:
    _emit(to_dot(_build(args), include_externals=not args.no_externals), args.out)
    return 0


def _cmd_order(args: argparse.Namespace) -> int:
    _emit("\n".join(_build(args).topological_order()), args.out)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    graph = _build(args)
    snapshot = Path(args.snapshot)

    if args.write:
        write_snapshot(snapshot, graph)
        print(f"Wrote: {snapshot}")
        return 0

    if not snapshot.exists():
        print(f"ERROR: {snapshot} missing. Run with --write to generate.", file=sys.stderr)
        return 2
    if not snapshots_equal(graph.to_dict(), load_snapshot(snapshot)):
        print(f"ERROR: module graph drift detected against {snapshot}. Regenerate and commit.", file=sys.stderr)
        return 3
    print(f"OK: module graph matches {snapshot}.")
    return 0


def make_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="featuregraph", description="Feature-module build graph")
    ap.add_argument("--manifest", default=None, help="Workspace manifest (YAML or JSON)")
    ap.add_argument("--feature", action="append", help="Restrict the build to these features (repeatable)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("graph", help="Print the module graph as JSON")
    p.add_argument("--out", default=None)
    p.set_defaults(func=_cmd_graph)

    p = sub.add_parser("dot", help="Print the module graph as Graphviz DOT")
    p.add_argument("--out", default=None)
    p.add_argument("--no-externals", action="store_true", help="Hide external packages")
    p.set_defaults(func=_cmd_dot)

    p = sub.add_parser("order", help="Print targets in build order")
    p.add_argument("--out", default=None)
    p.set_defaults(func=_cmd_order)

    p = sub.add_parser("check", help="Compare the module graph against a JSON snapshot")
    p.add_argument("--snapshot", default="featuregraph_snapshot.json")
    p.add_argument("--write", action="store_true", help="Regenerate the snapshot instead of checking")
    p.set_defaults(func=_cmd_check)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = make_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except FeatureGraphError as exc:
        print(f"ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
