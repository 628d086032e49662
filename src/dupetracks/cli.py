#!/usr/bin/env python3
"""
dupetracks CLI: find duplicate recordings and relocate the lower-quality copies.
Relocation moves files into the output directory or to the system trash, never erases them.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import mutagen
except ImportError:
    _MISSING_DEPS.append("mutagen")

try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install all dependencies:", file=sys.stderr)
    print("   pip install -r requirements.txt", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupetracks.core.models import DuplicateGroup, DuplicateResults, ScanParams
from dupetracks.commands import DuplicateScanCommand, BitrateCommand
from dupetracks.utils.convert_utils import ConvertUtils
from dupetracks.services.file_service import FileService
from dupetracks.services.duplicate_service import DuplicateService
from dupetracks.services.report_service import ReportService
from dupetracks.aliases import (
    EXTENSIONS_HELP_TEXT, WORKERS_HELP_TEXT, OUTPUT_HELP_TEXT, REPORT_NAMES, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--input", "-i",
            required=True,
            nargs="+",
            type=str,
            dest="inputs",
            help="Input directories (space separated) to scan"
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help=EXTENSIONS_HELP_TEXT
        )
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size", "-M",
            default=None,
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
        )
        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='',
            help=WORKERS_HELP_TEXT
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupetracks",
            description="dupetracks: duplicate music finder that keeps the best quality copy",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        duplicates = subparsers.add_parser(
            "duplicates",
            help="Find and relocate duplicate audio files",
            formatter_class=argparse.RawTextHelpFormatter
        )
        CLIApplication._add_common_arguments(duplicates)
        duplicates.add_argument(
            "--output", "-o",
            required=True,
            type=str,
            help=OUTPUT_HELP_TEXT
        )
        duplicates.add_argument(
            "--dry-run", "-d",
            action="store_true",
            help="Only detect duplicates and write reports, never move files"
        )
        duplicates.add_argument(
            "--trash",
            action="store_true",
            help="Send lower-quality copies to the system trash instead of the output directory"
        )
        duplicates.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt before moving files (for automation/scripts)"
        )

        bitrate = subparsers.add_parser(
            "bitrate",
            help="Analyze the bitrate distribution of audio files",
            formatter_class=argparse.RawTextHelpFormatter
        )
        CLIApplication._add_common_arguments(bitrate)
        bitrate.add_argument(
            "--output", "-o",
            required=True,
            type=str,
            help="Output CSV file path"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        for item in args.inputs:
            root_path = Path(item).resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {item}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {item}")

        try:
            min_size = ConvertUtils.human_to_bytes(args.min_size)
            if args.max_size is not None:
                max_size = ConvertUtils.human_to_bytes(args.max_size)
                if max_size < min_size:
                    self.error_exit("Maximum size cannot be less than minimum size")
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

        if args.workers is not None and args.workers < 1:
            self.error_exit("Worker count must be at least 1")

        if args.command != "duplicates":
            return

        if args.force and args.dry_run:
            self.error_exit("--force cannot be used with --dry-run")

        # Prevent interactive confirmation in non-TTY environments
        if not args.dry_run and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force to move files without confirmation, or --dry-run to only report."
                )

        output_path = Path(args.output).resolve()
        if output_path.exists() and not output_path.is_dir():
            self.error_exit(f"Output path is not a directory: {args.output}")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_human_readable(
                roots=[str(Path(item.strip()).resolve()) for item in args.inputs],
                output_dir=str(Path(args.output).resolve()) if args.command == "duplicates" else None,
                min_size_str=args.min_size,
                max_size_str=args.max_size,
                extensions_str=",".join(args.extensions),
                workers=args.workers,
                dry_run=getattr(args, "dry_run", False),
                use_trash=getattr(args, "trash", False),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} processed...")
            sys.stderr.flush()

    def run_duplicates(self, params: ScanParams) -> tuple:
        """Execute the duplicate workflow."""
        command = DuplicateScanCommand()
        if self.verbose:
            print(f"Finding duplicates using {params.workers} workers...")

        try:
            results, groups, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )

            if self.verbose:
                sys.stderr.write("\n")
                print()
                print(stats.print_summary())

            return results, groups
        except Exception as e:
            self.error_exit(f"Duplicate analysis failed: {e}")

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Print duplicate groups, keeper first."""
        if self.quiet:
            return

        if not groups:
            print("No duplicates found.")
            return

        total_duplicates = sum(g.duplicate_count for g in groups)
        print(f"\nFound {len(groups)} groups of duplicates ({total_duplicates} lower-quality files)")

        for idx, group in enumerate(groups, 1):
            keeper = group.original
            print(f"\n🎵 Group {idx} | Duplicates: {group.duplicate_count}")
            print(f"   [KEEP] {keeper.path} "
                  f"[{ConvertUtils.bitrate_to_human(keeper.bitrate)}, {ConvertUtils.bytes_to_human(keeper.size_bytes)}]")
            for file in group.duplicates:
                print(f"   [DUP]  {file.path} "
                      f"[{ConvertUtils.bitrate_to_human(file.bitrate)}, {ConvertUtils.bytes_to_human(file.size_bytes)}]")

    def output_matches(self, results: DuplicateResults) -> None:
        """Verbose listing of every matched pair with its justification."""
        if not self.verbose or self.quiet:
            return
        for match in sorted(results.matches, key=lambda m: (m.higher_quality.path, m.lower_quality.path)):
            print(f"\nHigher quality: {match.higher_quality.file_name} "
                  f"({ConvertUtils.bitrate_to_human(match.higher_quality.bitrate)})")
            print(f"Lower quality:  {match.lower_quality.file_name} "
                  f"({ConvertUtils.bitrate_to_human(match.lower_quality.bitrate)})")
            print(f"Reason: {match.match_reason}")
            print(f"Quality difference: {match.quality_difference}")

    def write_reports(self, results: DuplicateResults, groups: List[DuplicateGroup], output_dir: str) -> None:
        try:
            FileService.ensure_directory(output_dir)
            group_report = ReportService.write_group_report(groups, os.path.join(output_dir, REPORT_NAMES["groups"]))
            match_report = ReportService.write_match_report(results.matches, os.path.join(output_dir, REPORT_NAMES["matches"]))
        except RuntimeError as e:
            self.warning(f"Error generating report: {e}")
            return

        if not self.quiet:
            print(f"\nReport saved to: {group_report}")
            print(f"Match report saved to: {match_report}")

    def execute_relocation(self, groups: List[DuplicateGroup], params: ScanParams, force: bool = False) -> None:
        """Move every non-keeper file. Always shows a preview first."""
        files_to_move = DuplicateService.files_to_relocate(groups)
        if not files_to_move:
            return

        space_saved = ConvertUtils.bytes_to_human(
            DuplicateService.calculate_space_savings(groups, files_to_move))
        destination = "system trash" if params.use_trash else params.output_dir

        print()
        print("=" * 60)
        print(f"Summary: keep {len(groups)} files, move {len(files_to_move)} files to {destination}")
        print(f"Total space freed: {space_saved}")
        print()

        if params.dry_run:
            print("Dry run - no files will be moved")
            return

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding...")
        else:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )

            response = input(f"Are you sure you want to move {len(files_to_move)} files to {destination}? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Operation cancelled by user.")
                return

        print(f"\nMoving {len(files_to_move)} files...")
        moved_count = 0
        failed_files = []

        for i, path in enumerate(files_to_move, 1):
            try:
                if params.use_trash:
                    FileService.move_to_trash(path)
                    if self.verbose:
                        print(f"  [{i}/{len(files_to_move)}] Trashed: {os.path.basename(path)}")
                else:
                    new_path = FileService.move_to_directory(path, params.output_dir)
                    if self.verbose:
                        print(f"  [{i}/{len(files_to_move)}] Moved: {os.path.basename(path)} -> {new_path.name}")
                moved_count += 1
            except RuntimeError as e:
                failed_files.append((path, str(e)))
                self.warning(f"Error moving duplicate {path}: {e}")

        if failed_files:
            print(f"\n⚠️  Partial success: {moved_count}/{len(files_to_move)} files moved.")
            print(f"Failed to move {len(failed_files)} file(s):")
            for path, error in failed_files[:5]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if len(failed_files) > 5:
                print(f"  ...and {len(failed_files) - 5} more files")
        else:
            print(f"✅ Successfully moved {moved_count} files.")

    def run_bitrate(self, params: ScanParams, output: str) -> None:
        """Execute the bitrate analysis and write its CSV report."""
        try:
            stats, _ = BitrateCommand().execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except Exception as e:
            self.error_exit(f"Bitrate analysis failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
        if not self.quiet:
            print(stats.print_summary())

        try:
            report = ReportService.write_bitrate_report(stats, output)
        except RuntimeError as e:
            self.error_exit(f"Error generating report: {e}")

        if not self.quiet:
            print(f"\nReport saved to: {report}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("dupetracks").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directories: {', '.join(params.roots)}")

        if args.command == "bitrate":
            self.run_bitrate(params, args.output)
        else:
            results, groups = self.run_duplicates(params)
            self.output_matches(results)
            self.output_results(groups)
            self.write_reports(results, groups, params.output_dir)
            if groups:
                self.execute_relocation(groups, params, force=args.force)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
