from __future__ import annotations
import logging
import re
from typing import Optional

from flask import Flask, Response

from symserv.config.env import MAIN_BASE
from symserv.index.table import (
    SymbolIndex, Exact, Nearest, Resolution, format_hex, to_absolute, to_relative,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

_HEX_TOKEN = re.compile(r"[+-]?[0-9a-fA-F]+")
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


def install_index(index: SymbolIndex) -> None:
    """Publish the loaded index to request handlers. Call before serving."""
    app.config['SYMBOL_INDEX'] = index


def _get_index() -> Optional[SymbolIndex]:
    return app.config.get('SYMBOL_INDEX')


def parse_hex_address(token: str) -> Optional[int]:
    """Parse a signed 64-bit base-16 token (no 0x prefix). None if invalid."""
    if not _HEX_TOKEN.fullmatch(token):
        return None
    value = int(token, 16)
    if not _I64_MIN <= value <= _I64_MAX:
        return None
    return value


def render(result: Resolution, base: int = MAIN_BASE) -> Optional[str]:
    """Plain-text body for a resolution, or None when nothing matched."""
    if isinstance(result, Exact):
        e = result.entry
        return f"{format_hex(to_absolute(e.address, base))} {e.label}"
    if isinstance(result, Nearest):
        e = result.entry
        return f"{format_hex(to_absolute(e.address, base))}+{format_hex(result.offset)} {e.label}"
    return None


def _empty_404() -> Response:
    return Response(b'', status=404)


@app.errorhandler(404)
@app.errorhandler(405)
def _not_found(_err):
    # Unmatched routes and methods look the same as a failed lookup
    return _empty_404()


@app.get('/<token>')
def resolve_address(token: str):
    address = parse_hex_address(token)
    if address is None:
        logger.debug("unparsable address token %r", token)
        return _empty_404()
    index = _get_index()
    if index is None:
        return _empty_404()
    body = render(index.resolve(to_relative(address, MAIN_BASE)))
    if body is None:
        logger.debug("no symbol at or below %s", token)
        return _empty_404()
    return Response(body, mimetype='text/plain')
