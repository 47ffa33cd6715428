#!/usr/bin/env python3
"""
Load a delimited file into FalkorDB as nodes or relationships.

Usage:
    # Nodes, indexed under "users" on name and nationality
    GRAPH_SINK_FALKORDB_HOST=... python scripts/sink_csv.py --nodes users.csv \
        --fields name,nationality --index users:name,nationality

    # Nodes projected to a subset of the file's columns
    python scripts/sink_csv.py --nodes users.csv --fields name,nationality --project name --index users:name

    # Relationships between nodes found in "users" and "nations" by name
    python scripts/sink_csv.py --relationships citizenship.csv \
        --fields name,nationality,relationship,yearsofcitizenship \
        --from-index users:name --to-index nations:name --collect-failures
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from graph_sink.config import settings
from graph_sink.graph.factory import create_graph_client
from graph_sink.index_spec import IndexSpec
from graph_sink.schemes import NodeScheme, RelationshipScheme
from graph_sink.sink import GraphSink
from graph_sink.sources import project, read_delimited

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def parse_fields(value: str) -> list[str]:
    return [f.strip() for f in value.split(",") if f.strip()]


def parse_index(value: str) -> IndexSpec:
    """Parse ``NAME`` or ``NAME:field1,field2`` into an IndexSpec."""
    name, _, fields = value.partition(":")
    return IndexSpec(name, parse_fields(fields))


async def run(args: argparse.Namespace) -> int:
    fields = parse_fields(args.fields)

    if args.nodes:
        scheme = NodeScheme(parse_index(args.index) if args.index else None)
    else:
        if not args.from_index or not args.to_index:
            logger.error("--relationships requires --from-index and --to-index")
            return 2
        scheme = RelationshipScheme(fields, parse_index(args.from_index), parse_index(args.to_index))

    records = read_delimited(args.path, fields, delimiter=args.delimiter)
    if args.project:
        outgoing = parse_fields(args.project)
        records = (project(record, outgoing) for record in records)

    failure_policy = "collect" if args.collect_failures else settings.sink.failure_policy
    sink = GraphSink(
        create_graph_client(),
        scheme,
        failure_policy=failure_policy,
        log_every=settings.sink.log_every,
    )

    async with sink:
        report = await sink.write_all(records)

    logger.info(f"Done: {report.written} written, {len(report.failures)} failed")
    for failure in report.failures:
        logger.info(f"  record {failure.index}: {failure.error}")
    return 0 if report.ok else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Load a delimited file into FalkorDB")
    parser.add_argument("path", type=Path, help="Delimited input file")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--nodes", action="store_true", help="One node per record")
    mode.add_argument("--relationships", action="store_true", help="One relationship per record")
    parser.add_argument("--fields", required=True, help="Comma-separated column names, in file order")
    parser.add_argument("--project", help="Comma-separated subset of fields to sink (nodes mode)")
    parser.add_argument("--index", help="Node index as NAME[:field1,field2]")
    parser.add_argument("--from-index", help="Start-node index as NAME[:field]")
    parser.add_argument("--to-index", help="End-node index as NAME[:field]")
    parser.add_argument("--delimiter", default=",", help="Column delimiter (default: ,)")
    parser.add_argument("--collect-failures", action="store_true", help="Record records the scheme cannot write instead of stopping (malformed input lines still abort)")
    args = parser.parse_args()

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
