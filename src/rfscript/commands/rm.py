"""
rm ADDRESS...

Delete declarations, decorators included.
"""

from rfscript.workspace import Snapshot
from .common import SCRIPT, item_span, resolve_item


def cmd_rm(snap: Snapshot, args: str) -> None:
    addresses = args.split()
    if not addresses:
        snap.error(SCRIPT, 0, "usage: rm address...")
        return

    for address in addresses:
        item = resolve_item(snap, address)
        if item is None:
            continue
        start, end = item_span(snap, item)
        snap.delete(item.path, start, end)
