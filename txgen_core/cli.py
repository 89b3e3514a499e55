"""
Command-line interface for txgen.

Generates fixture datasets and verifies existing output directories.
"""

import argparse
import sys
from typing import Optional

from txgen_core.logger_utils import configure_logging, parse_level


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="txgen",
        description="Synthetic relational fixture generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # 100 users, 1000 transactions, 10 providers as JSON lines in ./output
    txgen generate

    # Skewed (hot user) transactions as CSV, ids starting at 1000
    txgen generate -u 5000 -t 1000000 -p 15 --skewed -f csv -i 1000

    # Independent id sequences per entity kind
    txgen generate --id-mode per-kind --user-start-id 1 --transaction-start-id 900000

    # Generate from a YAML file, overriding one value
    txgen generate --config fixtures.yaml --users 50

    # Check an existing output directory
    txgen verify -o output -f csv
""",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument(
        "--json-logs", action="store_true", default=None, help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # === txgen version ===
    subparsers.add_parser("version", help="Show version info")

    # === txgen generate ===
    gen_parser = subparsers.add_parser("generate", help="Generate a fixture dataset")
    gen_parser.add_argument("--config", "-c", help="YAML configuration file")
    gen_parser.add_argument("--users", "-u", type=int, help="Number of users (default: 100)")
    gen_parser.add_argument(
        "--transactions", "-t", type=int, help="Number of transactions (default: 1000)"
    )
    gen_parser.add_argument(
        "--providers", "-p", type=int, help="Number of payment providers (default: 10)"
    )
    gen_parser.add_argument(
        "--skewed",
        "-s",
        action="store_true",
        default=None,
        help="Skew transactions towards low-index (hot) users",
    )
    gen_parser.add_argument("--output-dir", "-o", help="Output directory (default: output)")
    gen_parser.add_argument(
        "--format", "-f", choices=["json", "csv"], help="Output format (default: json)"
    )
    gen_parser.add_argument(
        "--id-mode",
        choices=["shared", "per-kind"],
        help="One id sequence for all entities, or one per entity kind (default: shared)",
    )
    gen_parser.add_argument("--start-id", "-i", type=int, help="First id to allocate (default: 1)")
    for kind in ("user", "address", "provider", "transaction"):
        gen_parser.add_argument(
            f"--{kind}-start-id",
            type=int,
            help=f"First {kind} id (per-kind id mode only)",
        )
    gen_parser.add_argument(
        "--no-address-ids",
        dest="address_ids",
        action="store_false",
        default=None,
        help="Write addresses without their own id column",
    )
    gen_parser.add_argument("--seed", type=int, help="Random seed for reproducible values")
    gen_parser.add_argument(
        "--values", choices=["faker", "mimesis"], help="Fake value library (default: faker)"
    )
    gen_parser.add_argument("--locale", help="Locale for the fake value library")
    gen_parser.add_argument("--min-amount", type=float, help="Exclusive minimum amount (default: 1.0)")
    gen_parser.add_argument(
        "--max-amount", type=float, help="Exclusive maximum amount (default: 1000.0)"
    )
    gen_parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    gen_parser.add_argument(
        "--verify", action="store_true", help="Verify the output once generation finishes"
    )

    # === txgen verify ===
    verify_parser = subparsers.add_parser("verify", help="Verify a generated dataset")
    verify_parser.add_argument("--output-dir", "-o", default="output", help="Output directory")
    verify_parser.add_argument("--format", "-f", choices=["json", "csv"], default="json")
    verify_parser.add_argument(
        "--id-mode", choices=["shared", "per-kind"], default="shared", help="Id mode of the run"
    )
    verify_parser.add_argument(
        "--no-address-ids", dest="address_ids", action="store_false", help="Addresses have no id"
    )
    verify_parser.add_argument("--users", type=int, help="Expected number of users and addresses")
    verify_parser.add_argument("--transactions", type=int, help="Expected number of transactions")
    verify_parser.add_argument("--providers", type=int, help="Expected number of providers")
    verify_parser.add_argument(
        "--min-amount", type=float, help="Exclusive minimum transaction amount (default: 0)"
    )
    verify_parser.add_argument(
        "--max-amount", type=float, help="Exclusive maximum transaction amount (default: none)"
    )

    # === txgen config ===
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_cmd")

    validate_parser = config_subparsers.add_parser("validate", help="Validate config file")
    validate_parser.add_argument("--file", "-f", required=True, help="Config file path")

    # Parse arguments
    parsed_args = parser.parse_args(args)

    try:
        level = parse_level(parsed_args.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    configure_logging(level=level, json_format=parsed_args.json_logs)

    if not parsed_args.command:
        parser.print_help()
        return 0

    if parsed_args.command == "version":
        from txgen_core import __version__

        print(f"txgen v{__version__}")
        return 0

    if parsed_args.command == "config":
        return handle_config(parsed_args)

    if parsed_args.command == "generate":
        return handle_generate(parsed_args)

    if parsed_args.command == "verify":
        return handle_verify(parsed_args)

    return 0


def build_run_config(args):
    """Merge the optional YAML file with the flags given on the command line."""
    from txgen_core.config import load_config, run_config_from_dict

    file_config = load_config(args.config) if args.config else {}
    overrides = {
        "users": args.users,
        "transactions": args.transactions,
        "providers": args.providers,
        "skewed": args.skewed,
        "output_dir": args.output_dir,
        "format": args.format,
        "id_mode": args.id_mode,
        "start_id": args.start_id,
        "start_ids": {
            "user": args.user_start_id,
            "address": args.address_start_id,
            "provider": args.provider_start_id,
            "transaction": args.transaction_start_id,
        },
        "address_ids": args.address_ids,
        "seed": args.seed,
        "values": args.values,
        "locale": args.locale,
        "min_amount": args.min_amount,
        "max_amount": args.max_amount,
    }
    return run_config_from_dict(file_config, overrides)


def handle_generate(args) -> int:
    """Handle generate command."""
    import txgen_core
    from txgen_core.progress import TqdmProgress

    try:
        config = build_run_config(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 2

    progress = None if args.no_progress else TqdmProgress()
    runner = txgen_core.GenerationRunner(config, progress=progress)
    try:
        result = runner.run()
    finally:
        if progress is not None:
            progress.close()

    # Print summary
    print(f"\n{'=' * 60}")
    print(f"  Generation Complete - {result.status}")
    print(f"{'=' * 60}")
    print(f"  Run ID:          {result.run_id}")
    print(f"  Output:          {result.output_dir} ({result.format})")
    for stem in ("users", "addresses", "providers", "transactions"):
        print(f"  {stem.capitalize() + ':':<16} {result.counts.get(stem, 0):,}")
    if result.next_ids and config.id_mode == "shared":
        print(f"  Next free id:    {result.next_ids['user']:,}")
    print(f"  Duration:        {result.duration_seconds:.1f}s")
    if result.error:
        print(f"  Error:           {result.error}")
    print(f"{'=' * 60}\n")

    if not result.ok:
        return 1

    if args.verify:
        from txgen_core.verify import verify_output

        report = verify_output(
            config.output_dir,
            config.format,
            address_ids=config.address_ids,
            expected=config.targets(),
            id_mode=config.id_mode,
            min_amount=config.min_amount,
            max_amount=config.max_amount,
        )
        return _print_report(report)

    return 0


def handle_verify(args) -> int:
    """Handle verify command."""
    from txgen_core.verify import verify_output

    expected = {}
    if args.users is not None:
        expected["users"] = args.users
        expected["addresses"] = args.users
    if args.providers is not None:
        expected["providers"] = args.providers
    if args.transactions is not None:
        expected["transactions"] = args.transactions

    try:
        report = verify_output(
            args.output_dir,
            args.format,
            address_ids=args.address_ids,
            expected=expected or None,
            id_mode=args.id_mode,
            min_amount=args.min_amount,
            max_amount=args.max_amount,
        )
    except FileNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return _print_report(report)


def _print_report(report) -> int:
    counts = ", ".join(f"{stem}={count:,}" for stem, count in report.counts.items())
    if report.ok:
        print(f"✅ Output verified: {report.output_dir} ({counts})")
        return 0
    print(f"❌ Output verification failed: {report.output_dir} ({counts})")
    for problem in report.problems:
        print(f"  - {problem}")
    return 1


def handle_config(args) -> int:
    """Handle config subcommands."""
    from txgen_core.config import load_config, run_config_from_dict

    if args.config_cmd == "validate":
        try:
            run_config_from_dict(load_config(args.file))
            print(f"✅ Configuration valid: {args.file}")
            return 0
        except Exception as e:
            print(f"❌ Configuration invalid: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
