"""Entry point for Cube Burst."""

import argparse
from pathlib import Path

from cubeburst.app import CubeburstApp
from cubeburst.engine.save import SAVE_FILE, FileSaveStore
from cubeburst.logging_config import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Cube Burst — terminal version")
    parser.add_argument("--save-file", type=Path, default=SAVE_FILE, help=f"Save file (default: {SAVE_FILE})")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args = parser.parse_args()

    # The TUI owns the terminal, so logs only go to a file
    setup_logging(level=args.log_level, log_file=args.log_file, console=False)

    app = CubeburstApp(store=FileSaveStore(args.save_file))
    app.run()


if __name__ == "__main__":
    main()
