"""Entry point for the web version: python -m cubeburst.web"""

import argparse
from pathlib import Path

from cubeburst.engine.save import SAVE_FILE, FileSaveStore
from cubeburst.logging_config import setup_logging
from cubeburst.web.server import configure, run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Cube Burst — Web Version")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--save-file", type=Path, default=SAVE_FILE, help=f"Save file (default: {SAVE_FILE})")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    configure(FileSaveStore(args.save_file))

    print("\n  🧊 Cube Burst (Web Edition)")
    print(f"  ➜ http://{args.host}:{args.port}/api/frame\n")

    run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
