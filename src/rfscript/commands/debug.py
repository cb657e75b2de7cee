"""
debug key=value ...

Set session debug options. A key without a value is set to "1".
The `trace` option echoes each command to stderr before it runs.
"""

from rfscript.logging_config import logger
from rfscript.workspace import Snapshot


def cmd_debug(snap: Snapshot, args: str) -> None:
    for field in args.split():
        key, sep, value = field.partition("=")
        if not sep:
            value = "1"
        snap.session.debug[key] = value
        logger.debug(f"debug option {key}={value}")
