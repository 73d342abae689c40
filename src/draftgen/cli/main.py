# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the draftgen command-line interface."""

import argparse
import sys
from pathlib import Path

from draftgen.importer.archive import ArchiveError
from draftgen.importer.import_data import ImportDataError
from draftgen.logging_config import setup_logging
from draftgen.pipeline.pipeline import (
    ImportReport,
    ImportStatus,
    PipelineConfig,
    check_import_status,
    force_complete_reimport,
    regenerate_assets,
    reimport_changes,
    set_package_default,
)
from draftgen.workspace.config import (
    WORKSPACE_CONFIG_FILENAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    dump_workspace_config,
    load_workspace_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the draftgen CLI."""
    parser = argparse.ArgumentParser(
        prog="draftgen",
        description="draftgen: incremental code generator for narrative project archives",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new draftgen workspace",
        description=f"Create a {WORKSPACE_CONFIG_FILENAME} file for a project archive.",
    )
    init_parser.add_argument("archive", help="Path of the project archive, relative to the workspace")
    _add_directory_argument(init_parser, "Directory to initialize the workspace in")
    init_parser.add_argument(
        "--output-directory",
        default=None,
        help="Directory for generated files (default: draftgen-output)",
    )

    # import subcommand
    import_parser = subparsers.add_parser(
        "import",
        help="Import the archive and regenerate changed code",
        description="Import the project archive and regenerate the code of all changed domains.",
    )
    _add_directory_argument(import_parser, "Directory containing the draftgen workspace")
    import_parser.add_argument(
        "--full",
        action="store_true",
        help="Regenerate everything, not only the changed domains",
    )

    # regenerate-assets subcommand
    assets_parser = subparsers.add_parser(
        "regenerate-assets",
        help="Recreate assets from the last import without reading the archive",
        description="Materialize all assets again from the stored import data.",
    )
    _add_directory_argument(assets_parser, "Directory containing the draftgen workspace")

    # status subcommand
    status_parser = subparsers.add_parser(
        "status",
        help="Check that generated files and assets are present",
        description="Report whether the import data, the generated files and the assets are complete.",
    )
    _add_directory_argument(status_parser, "Directory containing the draftgen workspace")

    # package-default subcommand
    package_parser = subparsers.add_parser(
        "package-default",
        help="Set whether a package is loaded by default",
        description="Override the default-load flag of a package. The override survives reimports.",
    )
    package_parser.add_argument("name", help="Name of the package")
    package_parser.add_argument("state", choices=["on", "off"], help="Load the package by default or not")
    _add_directory_argument(package_parser, "Directory containing the draftgen workspace")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_directory_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help=f"{help_text} (default: current directory)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "import":
        return _cmd_import(args)
    if args.command == "regenerate-assets":
        return _cmd_regenerate_assets(args)
    if args.command == "status":
        return _cmd_status(args)
    if args.command == "package-default":
        return _cmd_package_default(args)
    return 0


def _load_workspace(args: argparse.Namespace) -> PipelineConfig | None:
    """Load the workspace of *args* and set up logging; print an error and return None on failure."""
    directory = Path(args.directory).resolve()
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    config_path = directory / WORKSPACE_CONFIG_FILENAME
    if not config_path.exists():
        print(
            f"Error: no draftgen workspace found at '{directory}'. Run 'draftgen init' to initialize a workspace.",
            file=sys.stderr,
        )
        return None

    try:
        config = load_workspace_config(config_path)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    setup_logging("DEBUG" if args.verbose else config.log_level)
    return PipelineConfig.from_workspace(directory, config)


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_path = directory / WORKSPACE_CONFIG_FILENAME
    if config_path.exists():
        print(f"Error: workspace already exists at '{config_path}'.", file=sys.stderr)
        return 1

    config = WorkspaceConfig(archive=args.archive)
    if args.output_directory:
        config.output_directory = args.output_directory
    content = "# draftgen workspace configuration\n" + dump_workspace_config(config)
    config_path.write_text(content, encoding="utf-8")
    print(f"Initialized draftgen workspace at '{config_path}'.")
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    """Handle the import subcommand."""
    pipeline = _load_workspace(args)
    if pipeline is None:
        return 1

    run = force_complete_reimport if args.full else reimport_changes
    try:
        report = run(pipeline)
    except ArchiveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_report(report)
    return 0 if report.ok else 1


def _cmd_regenerate_assets(args: argparse.Namespace) -> int:
    """Handle the regenerate-assets subcommand."""
    pipeline = _load_workspace(args)
    if pipeline is None:
        return 1

    try:
        report = regenerate_assets(pipeline)
    except ImportDataError as exc:
        print(f"Error: {exc}. Run 'draftgen import' first.", file=sys.stderr)
        return 1

    _print_report(report)
    return 0 if report.ok else 1


def _cmd_status(args: argparse.Namespace) -> int:
    """Handle the status subcommand."""
    pipeline = _load_workspace(args)
    if pipeline is None:
        return 1

    status = check_import_status(pipeline)
    print(f"Status: {status.value}")
    return 0 if status is ImportStatus.VALID else 1


def _cmd_package_default(args: argparse.Namespace) -> int:
    """Handle the package-default subcommand."""
    pipeline = _load_workspace(args)
    if pipeline is None:
        return 1

    try:
        set_package_default(pipeline, args.name, args.state == "on")
    except ImportDataError as exc:
        print(f"Error: {exc}. Run 'draftgen import' first.", file=sys.stderr)
        return 1
    except KeyError:
        print(f"Error: no package named '{args.name}' in the import data.", file=sys.stderr)
        return 1

    print(f"Package '{args.name}' is {'loaded' if args.state == 'on' else 'not loaded'} by default.")
    print("Run 'draftgen import' to regenerate the database.")
    return 0


def _print_report(report: ImportReport) -> None:
    for warning in report.warnings:
        print(f"Warning: {warning}")
    for message in report.malformed.values():
        print(f"Error: {message}", file=sys.stderr)
    for name, message in report.failed.items():
        print(f"Error: {name}: {message}", file=sys.stderr)
    for message in report.asset_errors:
        print(f"Error: {message}", file=sys.stderr)
    if report.dirty:
        print(f"Regenerated domains: {', '.join(d.value for d in report.dirty)}")
    else:
        print("Everything is up to date.")
    for name in report.written:
        print(f"  wrote {name}")
    for name in report.removed:
        print(f"  removed {name}")
    if report.materialized:
        print(f"Materialized {len(report.materialized)} asset(s).")
