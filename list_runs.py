#!/usr/bin/env python
"""List and manage evolution runs.

Usage:
    python list_runs.py                    # List recent runs
    python list_runs.py --type evolve      # Filter by type
    python list_runs.py --limit 50         # Show more runs
    python list_runs.py --cleanup --keep 5 # Clean old runs (dry-run)
    python list_runs.py --cleanup --keep 5 --force  # Actually delete
"""

import argparse

from mesh_evolve.utils.run_manager import get_run_manager


def main():
    parser = argparse.ArgumentParser(description="List and manage evolution runs")
    parser.add_argument(
        "--type",
        type=str,
        help="Filter by run type (evolve, render, benchmark)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum runs to show (default: 20)"
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Clean up old runs"
    )
    parser.add_argument(
        "--keep",
        type=int,
        default=10,
        help="Number of runs to keep when cleaning (default: 10)"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Actually delete (default is dry-run)"
    )

    args = parser.parse_args()

    manager = get_run_manager()

    if args.cleanup:
        print(f"Cleaning up runs, keeping {args.keep} most recent...")
        deleted = manager.cleanup_old_runs(
            keep_count=args.keep,
            run_type=args.type,
            dry_run=not args.force,
        )
        if deleted:
            action = "Deleted" if args.force else "Would delete"
            print(f"{action} {len(deleted)} runs:")
            for run_id in deleted:
                print(f"  - {run_id}")
        else:
            print("No runs to clean up")
        return

    runs = manager.list_runs(run_type=args.type, limit=args.limit)

    if not runs:
        print("No runs found")
        if args.type:
            print(f"(filtered by type: {args.type})")
        return

    print(f"{'Run ID':<50} {'Type':<10} {'Status':<12} {'Generations':>11}")
    print("-" * 86)

    for run in runs:
        summary = run.metadata.summary or {}
        generations = summary.get("generations", "")
        print(f"{run.metadata.run_id:<50} {run.metadata.run_type:<10} "
              f"{run.metadata.status:<12} {generations:>11}")
        if "best_fitness" in summary:
            print(f"  -> best fitness {summary['best_fitness']:,} "
                  f"after {summary.get('elapsed', 0):.0f}s")

    print()
    print(f"Total: {len(runs)} runs shown")
    if args.type:
        print(f"(filtered by type: {args.type})")


if __name__ == "__main__":
    main()
