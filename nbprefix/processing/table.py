# nbprefix/processing/table.py

from __future__ import annotations
from typing import Sequence

import pandas as pd

from nbprefix.models import NamedSubnet

SEQUENCE_COLUMNS = [
    "index",
    "name",
    "network",
    "prefix_len",
    "cidr",
    "first_host",
    "last_host",
    "broadcast",
    "size",
]

DOCUMENT_COLUMNS = ["name", "prefix", "description", "status", "is_pool", "tenant_id"]


def sequence_to_dataframe(named: Sequence[NamedSubnet]) -> pd.DataFrame:
    """
    One row per generated subnet, in generation order.

    ``index`` is 1-based, matching the numbering shown to users.
    """
    rows = []
    for i, item in enumerate(named, start=1):
        sub = item.subnet
        rows.append({
            "index": i,
            "name": item.name,
            "network": sub.network,
            "prefix_len": sub.prefix_len,
            "cidr": sub.cidr,
            "first_host": sub.first_host,
            "last_host": sub.last_host,
            "broadcast": sub.broadcast,
            "size": sub.size,
        })
    return pd.DataFrame(rows, columns=SEQUENCE_COLUMNS)


def preview_rows(df: pd.DataFrame, head: int = 5, tail: int = 2) -> tuple[pd.DataFrame, int]:
    """
    Shorten a long listing to its first ``head`` and last ``tail`` rows.

    Returns:
        (rows to show, number of rows left out). Tables no longer than
        head + tail come back whole.
    """
    if len(df) <= head + tail:
        return df, 0
    shown = pd.concat([df.head(head), df.tail(tail)])
    return shown, len(df) - head - tail


def document_to_dataframe(prefixes: dict) -> pd.DataFrame:
    """Flatten a {name: PrefixRecord} mapping."""
    rows = [
        {"name": name, **record.to_dict(), "tenant_id": record.tenant_id}
        for name, record in prefixes.items()
    ]
    df = pd.DataFrame(rows, columns=DOCUMENT_COLUMNS)
    # nullable ints so a missing tenant does not turn the column into floats
    df["tenant_id"] = df["tenant_id"].astype("Int64")
    return df
