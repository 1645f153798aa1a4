from __future__ import annotations
import os
from dataclasses import dataclass

# Load address of the main module; every catalog address is relative to it.
MAIN_BASE = 0x7100000000


@dataclass(frozen=True)
class ServerConfig:
    symbol_file: str = "script.json"
    host: str = "localhost"
    port: int = 50204


def parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def get_server_config() -> ServerConfig:
    """Server settings from SYMSERV_* env vars. Raises ValueError on a bad port."""
    d = ServerConfig()
    port = os.getenv("SYMSERV_PORT")
    return ServerConfig(
        symbol_file=os.getenv("SYMSERV_SYMBOL_FILE", d.symbol_file),
        port=d.port if port is None else parse_port(port),
    )
