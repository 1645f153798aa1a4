"""CLI entrypoint for the symbol server.

Loads the script catalog, builds the symbol index and serves lookups over
HTTP on the loopback interface until interrupted.
"""

import argparse
import logging
import sys
from typing import List, Optional

from symserv import __version__
from symserv.config.env import MAIN_BASE, get_server_config, parse_port
from symserv.catalog.loader import load_catalog
from symserv.catalog.records import CatalogError
from symserv.index.table import SymbolIndex
from symserv.api.server import app, install_index


def _port(value: str) -> int:
    try:
        return parse_port(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="symserv",
        description="Resolve main-module addresses to script symbols over HTTP",
    )
    try:
        cfg = get_server_config()
    except ValueError as e:
        p.error(f"SYMSERV_PORT: {e}")
    p.add_argument("-s", "--symbol-file", default=cfg.symbol_file,
                   help=f"Script catalog JSON (default: {cfg.symbol_file})")
    p.add_argument("-p", "--port", type=_port, default=cfg.port,
                   help=f"Port to listen on (default: {cfg.port})")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        entries = load_catalog(args.symbol_file, MAIN_BASE)
    except CatalogError as e:
        print(f"Failed to load symbol file: {e}", file=sys.stderr)
        return 1

    install_index(SymbolIndex(entries))
    cfg = get_server_config()
    logging.getLogger(__name__).info("listening on %s:%d", cfg.host, args.port)
    app.run(host=cfg.host, port=args.port, threaded=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
