"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def _add_period_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", type=int, required=True, help="Forecast year, e.g. 2026")
    parser.add_argument(
        "--quarter",
        type=int,
        choices=[1, 2, 3, 4],
        default=None,
        help="Restrict to one calendar quarter (default: whole year)",
    )


def _weight_pair(value: str) -> tuple[str, float]:
    """Parse CODE=WEIGHT, e.g. 12=0.6."""
    code, sep, weight = value.partition("=")
    if not sep or not code.strip():
        raise argparse.ArgumentTypeError(f"Expected CODE=WEIGHT, got {value!r}")
    try:
        return code.strip(), float(weight)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Weight must be a number, got {weight!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="funnel-landing", description="Weighted revenue landing forecast")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (environment variables still override it)",
    )
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--output", type=Path, default=None, help="Write JSON to file (default: stdout)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # landing
    landing_parser = subparsers.add_parser("landing", help="Landing figures (served from cache when fresh)")
    _add_period_args(landing_parser)
    landing_parser.add_argument(
        "--with-records",
        action="store_true",
        help="Include orders, quotations and opportunities in output",
    )

    # sync
    sync_parser = subparsers.add_parser("sync", help="Recompute from Nicoka and refresh the cache")
    _add_period_args(sync_parser)

    # last-sync
    last_sync_parser = subparsers.add_parser("last-sync", help="When the period was last synced")
    _add_period_args(last_sync_parser)

    # simulate
    simulate_parser = subparsers.add_parser("simulate", help="Landing under hypothetical weights")
    _add_period_args(simulate_parser)
    simulate_parser.add_argument(
        "--quotation-weight",
        type=_weight_pair,
        action="append",
        default=[],
        metavar="CODE=WEIGHT",
        help="Quotation status weight override (repeatable)",
    )
    simulate_parser.add_argument(
        "--opportunity-weight",
        type=_weight_pair,
        action="append",
        default=[],
        metavar="CODE=WEIGHT",
        help="Opportunity stage weight override (repeatable)",
    )
    simulate_parser.add_argument(
        "--merge-stored",
        action="store_true",
        help="Use stored weights for codes not overridden (default: calculator defaults)",
    )
    simulate_parser.add_argument("--save", type=str, default=None, metavar="NAME", help="Save as named scenario")
    simulate_parser.add_argument("--notes", type=str, default=None, help="Notes for the saved scenario")

    # weights
    weights_parser = subparsers.add_parser("weights", help="Manage status / stage weights")
    weights_parser.add_argument("action", choices=["list", "set", "disable", "enable"])
    weights_parser.add_argument("--kind", choices=["quotation", "opportunity"], required=True)
    weights_parser.add_argument("--code", type=str, help="Status or stage code (set/disable/enable)")
    weights_parser.add_argument("--label", type=str, help="Display label (set; default from status maps)")
    weights_parser.add_argument("--weight", type=float, help="Weight in [0, 1] (set)")
    weights_parser.add_argument("--description", type=str, default=None)

    # scenarios
    scenarios_parser = subparsers.add_parser("scenarios", help="List or delete saved scenarios")
    scenarios_parser.add_argument("action", choices=["list", "delete"])
    scenarios_parser.add_argument("--id", type=int, default=None, help="Scenario id (delete)")

    # status-maps
    subparsers.add_parser("status-maps", help="Print status, stage and type labels")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    from funnel_landing.errors import CacheUnavailableError, InvalidWeightError, SourceUnavailableError

    handlers = {
        "landing": _run_landing,
        "sync": _run_sync,
        "last-sync": _run_last_sync,
        "simulate": _run_simulate,
        "weights": _run_weights,
        "scenarios": _run_scenarios,
        "status-maps": _run_status_maps,
    }
    try:
        handlers[args.command](args)
    except SourceUnavailableError as e:
        raise SystemExit(f"CRM unavailable: {e}")
    except InvalidWeightError as e:
        raise SystemExit(str(e))
    except CacheUnavailableError as e:
        raise SystemExit(f"Database unavailable: {e}")


def _load_settings(args: argparse.Namespace):
    from funnel_landing.config import Settings

    settings = Settings.load(args.config)
    if args.db is not None:
        settings = settings.model_copy(update={"db_path": args.db})
    return settings


def _build_service(args: argparse.Namespace):
    from datetime import timedelta

    from funnel_landing.connectors.registry import ConnectorRegistry
    from funnel_landing.errors import CacheUnavailableError
    from funnel_landing.service import LandingService
    from funnel_landing.store import SnapshotStore, WeightStore

    settings = _load_settings(args)
    weights = WeightStore(settings.db_path)
    try:
        snapshots = SnapshotStore(settings.db_path)
    except CacheUnavailableError as e:
        logging.getLogger(__name__).warning("Running without snapshot cache: %s", e)
        snapshots = None
    source = ConnectorRegistry.get("nicoka", **settings.connector_kwargs())
    return LandingService(
        source,
        weights,
        snapshots,
        cache_max_age=timedelta(seconds=settings.cache_max_age),
    )


def _period(args: argparse.Namespace):
    from funnel_landing.models.period import PeriodFilter

    return PeriodFilter(year=args.year, quarter=args.quarter)


def _emit(args: argparse.Namespace, data, summary: str) -> None:
    output = json.dumps(data, indent=2, default=str, ensure_ascii=False)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"{summary} (wrote to {args.output})")
    else:
        print(output)


def _report_payload(report, with_records: bool) -> dict:
    exclude = None if with_records else {"orders", "quotations", "opportunities"}
    return report.model_dump(mode="json", exclude=exclude)


def _run_landing(args: argparse.Namespace) -> None:
    """Run landing command."""
    service = _build_service(args)
    try:
        report = service.get_landing(_period(args))
    finally:
        service.source.close()
    source = "cache" if report.from_cache else "Nicoka"
    _emit(
        args,
        _report_payload(report, args.with_records),
        f"Landing {_period(args).label()}: {report.landing_total:.2f} (from {source})",
    )


def _run_sync(args: argparse.Namespace) -> None:
    """Run sync command."""
    service = _build_service(args)
    try:
        report = service.force_sync(_period(args))
    finally:
        service.source.close()
    _emit(
        args,
        _report_payload(report, with_records=False),
        f"Synced {_period(args).label()}: {report.order_count} orders, "
        f"{report.quotation_count} quotations, {report.opportunity_count} opportunities",
    )


def _run_last_sync(args: argparse.Namespace) -> None:
    """Run last-sync command."""
    from funnel_landing.store import SnapshotStore

    settings = _load_settings(args)
    period = _period(args)
    last = SnapshotStore(settings.db_path).last_synced_at(period.cache_data_type, period.year)
    print(last.isoformat() if last else "never")


def _run_simulate(args: argparse.Namespace) -> None:
    """Run simulate command. Leaves the snapshot cache alone; with --save, persists the scenario."""
    from funnel_landing.store import ScenarioStore

    service = _build_service(args)
    period = _period(args)
    q_overrides = dict(args.quotation_weight)
    o_overrides = dict(args.opportunity_weight)

    try:
        comparison = service.compare(period, q_overrides, o_overrides, merge_stored=args.merge_stored)
    finally:
        service.source.close()
    simulated = comparison.simulated
    data = comparison.model_dump(mode="json")

    if args.save:
        scenario = ScenarioStore(_load_settings(args).db_path).save(
            args.save,
            period,
            q_overrides,
            o_overrides,
            simulated,
            notes=args.notes,
        )
        data["scenario_id"] = scenario.id

    _emit(args, data, f"Simulated landing {period.label()}: {simulated.landing_total:.2f}")


def _run_weights(args: argparse.Namespace) -> None:
    """Run weights command."""
    from funnel_landing.status_maps import DEFAULT_STATUS_MAPS
    from funnel_landing.store import WeightKind, WeightStore

    store = WeightStore(_load_settings(args).db_path)
    kind = WeightKind(args.kind)

    if args.action == "list":
        rows = store.list_weights(kind, include_inactive=True)
        data = [
            {
                "code": w.status_id,
                "label": w.status_label,
                "weight": w.weight,
                "description": w.description,
                "active": w.active,
            }
            for w in rows
        ]
        _emit(args, data, f"{len(rows)} {kind.value} weights")
        return

    if not args.code:
        raise SystemExit(f"weights {args.action} requires --code")

    if args.action == "set":
        if args.weight is None:
            raise SystemExit("weights set requires --weight")
        if args.label:
            label = args.label
        elif kind is WeightKind.QUOTATION:
            label = DEFAULT_STATUS_MAPS.quotation_status_label(args.code)
        else:
            label = DEFAULT_STATUS_MAPS.opportunity_stage_label(args.code)
        saved = store.upsert_weight(kind, args.code, label, args.weight, args.description)
        print(f"Set {kind.value} weight {saved.status_id} ({saved.status_label}) = {saved.weight}")
    else:
        active = args.action == "enable"
        if not store.set_active(kind, args.code, active):
            raise SystemExit(f"No {kind.value} weight for code {args.code}")
        print(f"{'Enabled' if active else 'Disabled'} {kind.value} weight {args.code}")


def _run_scenarios(args: argparse.Namespace) -> None:
    """Run scenarios command."""
    from funnel_landing.store import ScenarioStore

    store = ScenarioStore(_load_settings(args).db_path)
    if args.action == "list":
        data = [
            {
                "id": s.id,
                "name": s.name,
                "period": s.period.label(),
                "quotation_weights": s.quotation_weights,
                "opportunity_weights": s.opportunity_weights,
                "result": s.result.model_dump(mode="json"),
                "notes": s.notes,
                "created_at": s.created_at.isoformat(),
            }
            for s in store.list_all()
        ]
        _emit(args, data, f"{len(data)} scenarios")
    elif args.action == "delete":
        if args.id is None:
            raise SystemExit("scenarios delete requires --id")
        if not store.delete(args.id):
            raise SystemExit(f"No scenario with id {args.id}")
        print(f"Deleted scenario {args.id}")


def _run_status_maps(args: argparse.Namespace) -> None:
    """Run status-maps command."""
    from funnel_landing.status_maps import DEFAULT_STATUS_MAPS

    _emit(args, DEFAULT_STATUS_MAPS.as_dict(), "Status maps")


if __name__ == "__main__":
    main()
