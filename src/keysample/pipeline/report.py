# keysample/pipeline/report.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, TextIO

from keysample.stats.results import Results
from keysample.stats.sizes import SizeStats
from keysample.types import Options, ValueType
from keysample.utilities.display import abbrev, format_bytes, format_count, format_histogram

logger = logging.getLogger(__name__)

_TYPE_LABELS = {
    ValueType.STRING: "Strings",
    ValueType.LIST: "Lists",
    ValueType.SET: "Sets",
    ValueType.SORTED_SET: "Sorted sets",
    ValueType.HASH: "Hashes",
}


def format_run_summary(
    *,
    instances: Sequence[Options],
    aggregator: object,
    workers: int,
    start_time: datetime,
    fail_fast: bool = True,
    color: bool = True,
) -> str:
    """
    Build a formatted, human-readable summary of the planned sampling session.
    """
    heading = f"Start Time: {start_time:%Y-%m-%d %H:%M:%S}"
    if color:
        heading = f"\033[31m{heading}\033[0m"

    targets = ", ".join(o.address for o in instances) or "None"
    total = sum(o.num_keys for o in instances)

    lines = [
        heading,
        ("\033[4mSampling Configuration\033[0m" if color
         else "Sampling Configuration"),
        f"Redis instances:            {len(instances)}",
        f"Addresses:                  {abbrev(targets)}",
        f"Keys per instance:          "
        + (", ".join(sorted({format_count(o.num_keys) for o in instances})) or "0"),
        f"Total keys to sample:       {format_count(total)}",
        f"Aggregator:                 {aggregator!r}",
        f"On instance failure:        {'abort' if fail_fast else 'skip and continue'}",
        f"Worker threads:             {workers}",
    ]
    return "\n".join(lines) + "\n"


def print_run_summary(**kwargs) -> None:
    """Print the run summary to stdout (CLI usage)."""
    print(format_run_summary(**kwargs), end="")


def log_run_summary(*, color: bool = False, **kwargs) -> None:
    """Log the run summary at INFO level."""
    summary = format_run_summary(color=color, **kwargs)
    for line in summary.rstrip("\n").splitlines():
        logger.info(line)


def _distribution_lines(title: str, dist: SizeStats, *, as_bytes: bool) -> list[str]:
    if dist.count == 0:
        return []
    fmt = format_bytes if as_bytes else format_count
    lines = [
        f"  {title}: min {fmt(dist.min)}, max {fmt(dist.max)}, "
        f"mean {fmt(dist.mean) if as_bytes else f'{dist.mean:,.1f}'} "
        f"({format_count(dist.count)} samples)"
    ]
    lines.extend("  " + ln for ln in format_histogram(dist.buckets(), as_bytes=as_bytes))
    return lines


def format_results(results: Results, *, top: int = 10, total_keys: Optional[int] = None) -> str:
    """
    Render one bucket's statistics as plain text.

    ``total_keys`` is the store-wide key count, shown for scale.
    """
    name = results.name or "(unnamed)"
    lines = [f"Bucket: {name}", "=" * max(8, len(name) + 8)]
    lines.append(f"Sampled keys:               {format_count(results.key_count)}")
    if total_keys is not None:
        lines.append(f"Store key count:            {format_count(total_keys)}")

    sections = [
        (ValueType.STRING, [("Value size", results.string_sizes, True)]),
        (ValueType.LIST, [
            ("Length", results.list_lengths, False),
            ("Element size", results.list_element_sizes, True),
        ]),
        (ValueType.SET, [
            ("Cardinality", results.set_cardinalities, False),
            ("Member size", results.set_member_sizes, True),
        ]),
        (ValueType.SORTED_SET, [
            ("Cardinality", results.sorted_set_cardinalities, False),
            ("Member size", results.sorted_set_member_sizes, True),
        ]),
        (ValueType.HASH, [
            ("Field count", results.hash_lengths, False),
            ("Field name size", results.hash_field_sizes, True),
            ("Field value size", results.hash_value_sizes, True),
        ]),
    ]

    for vt, dists in sections:
        n = results.type_counts.get(vt, 0)
        if not n:
            continue
        share = n / results.key_count
        lines.append("")
        lines.append(f"{_TYPE_LABELS[vt]}: {format_count(n)} sampled ({share:.1%})")
        for title, dist, as_bytes in dists:
            lines.extend(_distribution_lines(title, dist, as_bytes=as_bytes))
        keys = results.top_keys(vt, top)
        if keys:
            lines.append("  Top keys:")
            lines.extend(f"    {abbrev(k, 80)}  x{c}" for k, c in keys)
        members = results.top_members(vt, top)
        if members:
            lines.append("  Top members:" if vt is not ValueType.HASH else "  Top fields:")
            lines.extend(f"    {abbrev(m, 80)}  x{c}" for m, c in members)

    return "\n".join(lines) + "\n"


def render_text(results: Results, out: TextIO, **kwargs) -> None:
    """Write one bucket's plain-text report to ``out``."""
    out.write(format_results(results, **kwargs))
