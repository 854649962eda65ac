#!/usr/bin/env python3
"""
IndyGx CLI — Unified entry point for ecosystem stats, directory, comparison, reports, and API server.

USAGE:
  python -m indygx.cli stats                                # Ecosystem KPIs + type breakdown
  python -m indygx.cli list                                 # Every organization
  python -m indygx.cli list --type investor --search fin    # Filtered directory
  python -m indygx.cli show 42                              # One organization (fresh from Supabase)
  python -m indygx.cli compare 3 7 12                       # Side-by-side, up to 4
  python -m indygx.cli export --output ./reports/eco.xlsx   # Excel report
  python -m indygx.cli watch                                # Re-print stats on every backend change

  python -m indygx.cli serve                                # Start API server
  python -m indygx.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from indygx.config import ECOSYSTEM_TYPE_LABELS, ECOSYSTEM_TYPES, REPORTS_FOLDER, STAGE_LABELS
from indygx.data.client import EcosystemClient
from indygx.data.store import EcosystemStore
from indygx.data.schemas import EcosystemType, OrganizationFilter
from indygx.analytics.common import format_currency
from indygx.analytics.dashboard import compare_organizations, organization_card
from indygx.analytics.stats import type_counts


class LoadError(Exception):
    """Raised when the backend cannot be reached or queried."""


def _build_filter(args) -> OrganizationFilter | None:
    """Build an OrganizationFilter from CLI args."""
    t = getattr(args, "type", None)
    q = getattr(args, "search", None)
    if not t and not q:
        return None
    return OrganizationFilter(type=EcosystemType(t) if t else None, search=q or "")


@asynccontextmanager
async def _open_store(load: bool = True):
    """Open a client, optionally load the snapshot, and always close the client."""
    try:
        client = EcosystemClient()
    except ValueError as e:
        raise LoadError(str(e)) from e
    async with client:
        store = EcosystemStore(client)
        if load:
            try:
                await store.refresh()
            except Exception as e:
                raise LoadError(f"Failed to load data from Supabase: {e}") from e
        yield store


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  INDYGX — {title}")
    print("=" * 70)


def _print_stats(store: EcosystemStore) -> None:
    s = store.stats()
    print(f"\n  Ecosystem players:    {s.total_players:,}")
    print(f"  Startups supported:   {s.total_startups_supported:,}")
    print(f"  Capital deployed:     {format_currency(s.total_capital_deployed)}")
    print(f"  Avg portfolio size:   {s.average_portfolio_size:,}")
    print("\n  BY TYPE")
    for t, n in type_counts(s).items():
        print(f"    {ECOSYSTEM_TYPE_LABELS[t]:<22}{n:>6}")
    if s.by_stage:
        print("\n  BY STAGE")
        for stage, n in s.by_stage.items():
            print(f"    {STAGE_LABELS.get(stage, stage):<22}{n:>6}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def _stats(args):
    async with _open_store() as store:
        _banner("ECOSYSTEM STATS")
        _print_stats(store)
        print()


async def _list(args):
    async with _open_store() as store:
        org_filter = _build_filter(args)
        orgs = store.organizations(org_filter)
        label = org_filter.label if org_filter else "All Organizations"
        print(f"\n{label.upper()} ({len(orgs)}):\n")
        for card in map(organization_card, orgs):
            capital = card["capital_display"] or "-"
            print(f"{card['id']:<6}{card['name'][:40]:<42}{card['type_label']:<20}{capital:>8}"
                  f"  {', '.join(card['tags'])}")


async def _show(args):
    async with _open_store(load=False) as store:
        try:
            org = await store.fetch_profile(args.id)
        except Exception as e:
            raise LoadError(f"Failed to load data from Supabase: {e}") from e
        if org is None:
            print(f"  Organization not found: '{args.id}'")
            return 1
        _banner(org.name.upper())
        print(f"  {ECOSYSTEM_TYPE_LABELS[org.type.value]}  |  {org.headquarters}  |  {org.website}")
        if org.tagline:
            print(f"\n  {org.tagline}")
        print(f"\n  Founded:             {org.year_founded or '-'} ({org.years_active} years active)")
        print(f"  Startups supported:  {org.startups_supported:,}")
        print(f"  Capital deployed:    {format_currency(org.capital_deployed)}")
        print(f"  Portfolio size:      {org.portfolio_size or '-'}")
        print(f"  Stages:              {', '.join(STAGE_LABELS[s.value] for s in org.target_stages) or '-'}")
        print(f"  Sectors:             {', '.join(org.target_sectors) or '-'}")
        print(f"  Geography:           {', '.join(org.geographic_focus) or '-'}")
        print(f"  Services:            {', '.join(org.support_types) or '-'}")
        print()


async def _compare(args):
    async with _open_store() as store:
        try:
            data = compare_organizations(store.organizations(), args.ids)
        except ValueError as e:
            print(f"  {e}")
            return 1
        orgs = data["organizations"]
        if not orgs:
            print("  None of those organizations were found")
            return 1
        missing = set(args.ids) - {o["id"] for o in orgs}
        for m in sorted(missing):
            print(f"  Organization not found: '{m}'")

        _banner("COMPARISON")
        print(f"  {'':<22}" + "".join(f"{o['name'][:18]:<20}" for o in orgs))
        for metric in data["metrics"]:
            print(f"  {metric['label']:<22}" + "".join(f"{d:<20}" for d in metric["display"]))
        print()


async def _export(args):
    from indygx.reports.ecosystem_report import generate_excel

    async with _open_store() as store:
        org_filter = _build_filter(args)
        out = Path(args.output) if args.output else REPORTS_FOLDER / "Ecosystem_Report.xlsx"
        path = generate_excel(store, out, org_filter)
        print(f"\n  Saved {store.count()} organizations → {path}\n")


async def _watch(args):
    async with _open_store() as store:
        _banner("LIVE ECOSYSTEM STATS")
        _print_stats(store)
        last_loaded = store.loaded_at
        async with store.watch():
            print("\n  Watching for changes (Ctrl-C to stop)...")
            while True:
                await asyncio.sleep(args.interval)
                if store.loaded_at != last_loaded:
                    last_loaded = store.loaded_at
                    print(f"\n  Refreshed at {last_loaded:%H:%M:%S}")
                    _print_stats(store)
                elif store.last_error:
                    print(f"\n  Failed to load data from Supabase: {store.last_error}")


def _run(coro_fn):
    def command(args):
        try:
            return asyncio.run(coro_fn(args)) or 0
        except LoadError as e:
            print(f"  {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            return 0
    return command


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting IndyGx API on port {args.port}...")
    uvicorn.run("indygx.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--type", choices=ECOSYSTEM_TYPES, help="Ecosystem type")
    p.add_argument("--search", help="Match name, tagline, or tags")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="IndyGx — Startup ecosystem intelligence",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    p = subparsers.add_parser("stats", help="Ecosystem KPIs and breakdowns")
    p.set_defaults(func=_run(_stats))

    p = subparsers.add_parser("list", help="List organizations")
    _add_filter_args(p)
    p.set_defaults(func=_run(_list))

    p = subparsers.add_parser("show", help="Show one organization")
    p.add_argument("id", help="Organization id")
    p.set_defaults(func=_run(_show))

    p = subparsers.add_parser("compare", help="Compare up to 4 organizations")
    p.add_argument("ids", nargs="+", help="Organization ids")
    p.set_defaults(func=_run(_compare))

    p = subparsers.add_parser("export", help="Export Excel report")
    p.add_argument("--output", help="Output .xlsx path")
    _add_filter_args(p)
    p.set_defaults(func=_run(_export))

    p = subparsers.add_parser("watch", help="Print stats whenever the backend changes")
    p.add_argument("--interval", type=float, default=1.0, help="Poll interval in seconds")
    p.set_defaults(func=_run(_watch))

    p = subparsers.add_parser("serve", help="Start API server")
    p.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    p.add_argument("--reload", action="store_true", help="Enable auto-reload")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
