"""
Demo script: parse a delimited text file with listparse and report the results.

Usage:
    uv run python scripts/parse_records.py inputs/trades.csv
    uv run python scripts/parse_records.py inputs/trades.psv --config reader.yaml

Each line is parsed as a trade record::

    date, symbol, side, quantity, price, tags

where ``side`` is ``B`` or ``S``, ``price`` is optional (empty field) and
``tags`` is a ``key:value,key:value`` map. The reader config (delimiter,
header rows, date format ...) is loaded from ``--config`` when given.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("parse_records")


# ---------------------------------------------------------------------------
# Record parser
# ---------------------------------------------------------------------------

def _trade_parser(config):
    from listparse.parsers import (
        char_flag,
        double,
        json_key_value_map,
        long,
        sequence,
        string,
    )

    return sequence(
        config.date_parser().named("date"),
        string.nonempty().named("symbol"),
        char_flag("BS").named("side"),
        long.satisfies(lambda q: q > 0).named("quantity"),
        double.option().named("price"),
        json_key_value_map(string, string).option().named("tags"),
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    from listparse import ReaderConfig, load_config, read_records

    args = sys.argv[1:]
    if not args:
        log.error("Usage: parse_records.py <input> [--config reader.yaml]")
        sys.exit(2)

    input_path = args[0]
    config = ReaderConfig()
    if "--config" in args:
        config = load_config(args[args.index("--config") + 1])

    if not Path(input_path).exists():
        log.error("Input file not found: %s", input_path)
        sys.exit(1)

    batch = read_records(input_path, _trade_parser(config), config)

    log.info("=" * 70)
    log.info("Records : %d", len(batch.records))
    log.info("Failures: %d", len(batch.failures))
    log.info("=" * 70)

    if batch.values:
        df = batch.to_frame(
            columns=["date", "symbol", "side", "quantity", "price", "tags"]
        )
        log.info("\n%s", df.head(20).to_string(index=False))

    for record in batch.failures[:10]:
        log.warning("line %d: %s", record.line_no, record.result.error)


if __name__ == "__main__":
    main()
