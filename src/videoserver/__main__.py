from __future__ import annotations

import argparse
from pathlib import Path
import sys

import uvicorn

from player.core.config import load_config
from player.errors import ConfigError
from .log_config import setup_logging
from .main import create_app


def main() -> int:
    ap = argparse.ArgumentParser(description="Serve the current playlist video over HTTP and sync a display client")
    ap.add_argument("--profile", default="default", help="Config profile (reads configs/<profile>.yaml)")
    ap.add_argument("--config", help="Explicit YAML config file (overrides --profile lookup)")
    ap.add_argument("--host", help="Bind address")
    ap.add_argument("--port", type=int, help="Bind port")
    ap.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    ap.add_argument("videos", nargs="*", help="Initial playlist (overrides the configured videos)")
    args = ap.parse_args()

    try:
        cfg = load_config(args.profile, Path(args.config) if args.config else None)
    except ConfigError as e:
        print(f"{e} ({e.path})", file=sys.stderr)
        return 2
    if args.host:
        cfg.host = args.host
    if args.port:
        cfg.port = args.port
    if args.log_level:
        cfg.log_level = args.log_level
    if args.videos:
        cfg.videos = list(args.videos)

    setup_logging(cfg.log_level)
    app = create_app(cfg)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
