from dupetracks.core.models import MatchConfig

DEFAULT_EXTENSIONS_TEXT = ", ".join(MatchConfig.DEFAULT_AUDIO_EXTENSIONS)

EXTENSIONS_HELP_TEXT = (
    "Audio extensions to include (space separated).\n"
    f"Default: {DEFAULT_EXTENSIONS_TEXT}"
)

WORKERS_HELP_TEXT = (
    "Worker threads for metadata extraction and pair matching.\n"
    "Default: number of CPU cores"
)

OUTPUT_HELP_TEXT = (
    "Directory that receives the reports and the lower-quality copies\n"
    "  duplicate_report.csv : one row per group (keeper + its duplicates)\n"
    "  duplicate_matches.csv: one row per matched pair with the reason"
)

REPORT_NAMES = {
    "groups": "duplicate_report.csv",
    "matches": "duplicate_matches.csv",
}

EPILOG_TEXT = """
Examples:
  Find duplicates in two folders, write reports only
  %(prog)s duplicates -i ~/Music ~/Downloads -o ~/Music/_dupes --dry-run

  Move lower-quality copies into the output folder (with confirmation prompt)
  %(prog)s duplicates -i ~/Music -o ~/Music/_dupes

  Same as above but send them to the trash, no prompt (for scripts)
  %(prog)s duplicates -i ~/Music -o ~/reports --trash --force

  Bitrate distribution of a folder
  %(prog)s bitrate -i ~/Music -o ~/bitrates.csv
"""
