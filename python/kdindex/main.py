from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Iterator, List, Optional

import numpy as np
import numpy.typing as npt

from .bruteforce import brute_force_closest
from .config import KdIndexConfig
from .errors import KdTreeError, QueryMismatch
from .kdtree import KdTree
from .pointio import read_points, write_results

log = logging.getLogger(__name__)


def run_build(args: argparse.Namespace, config: KdIndexConfig) -> int:
    """Build kd-tree from data file and serialize it.

    Args:
        args: Parsed arguments. `data` and `output` are used.
        config: Settings.

    Returns:
        Exit code.
    """
    log.info("Reading data from %s", args.data)
    points = read_points(args.data, config.delimiter)

    tree = KdTree.create(points)

    output = args.output or f"{args.data}{config.tree_suffix}"
    log.info("Serializing KD tree to %s", output)
    with open(output, "w") as f:
        tree.dump(f)
    return 0


def _query_indices(
    tree: KdTree,
    original_points: npt.NDArray,
    queries: npt.NDArray,
    check_brute_force: bool,
) -> Iterator[int]:
    for query in queries:
        best = tree.nearest_neighbor(query)
        if best is None:
            raise QueryMismatch("No tree has been constructed")

        if check_brute_force:
            brute_force_index = brute_force_closest(original_points, query)

            # Check indices
            if best.index != brute_force_index:
                raise QueryMismatch(
                    f"Result indices don't match: {best.index} != {brute_force_index}"
                )

            # ..then check the actual points, in case there was an order change
            diff = float(
                np.sum(np.abs(best.coordinates - original_points[brute_force_index]))
            )
            if diff > 0:
                raise QueryMismatch(
                    "Deserialized tree results don't match brute force results, "
                    f"with total L1 error {diff}"
                )

        yield best.index


def run_query(args: argparse.Namespace, config: KdIndexConfig) -> int:
    """Query serialized kd-tree and check results with brute force search."""
    log.info("Deserializing %s", args.tree)
    with open(args.tree, "r") as f:
        tree = KdTree.load(f)

    # Read the original point data (for use later for correctness checking)
    log.info("Reading original points from %s", args.data)
    original_points = read_points(args.data, config.delimiter)

    log.info("Reading query points from %s", args.queries)
    queries = read_points(args.queries, config.delimiter)

    output = args.output or f"{args.queries}{config.results_suffix}"
    check = config.check_brute_force and not args.no_check
    write_results(output, _query_indices(tree, original_points, queries, check))

    log.info("Success!")
    return 0


def run_plot(args: argparse.Namespace, config: KdIndexConfig) -> int:
    from . import viz

    points = read_points(args.data, config.delimiter)
    tree = KdTree.create(points)

    if args.rerun:
        viz.log_to_rerun(tree, points, args.query)
        return 0

    import matplotlib.pyplot as plt

    viz.plot_partitions(tree, points, args.query)
    if args.save:
        plt.savefig(args.save)
    else:
        plt.show()
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kdindex", description="Build and query kd-tree spatial index"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logs", default=False
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Show only errors", default=False
    )
    parser.add_argument(
        "-d", "--delimiter", type=str, help="Delimiter of point files", default=None
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Build and serialize kd-tree")
    build_parser.add_argument("data", type=str, help="Data set file")
    build_parser.add_argument(
        "-o", "--output", type=str, help="Serialized kd-tree file", default=None
    )
    build_parser.set_defaults(func=run_build)

    query_parser = subparsers.add_parser(
        "query", help="Query serialized kd-tree with query points"
    )
    query_parser.add_argument("tree", type=str, help="Serialized kd-tree file")
    query_parser.add_argument("data", type=str, help="Original data set file")
    query_parser.add_argument("queries", type=str, help="Query points file")
    query_parser.add_argument(
        "-o", "--output", type=str, help="Results file", default=None
    )
    query_parser.add_argument(
        "--no-check",
        action="store_true",
        help="Skip brute force cross check",
        default=False,
    )
    query_parser.set_defaults(func=run_query)

    plot_parser = subparsers.add_parser("plot", help="Plot 2D kd-tree partitions")
    plot_parser.add_argument("data", type=str, help="Data set file")
    plot_parser.add_argument(
        "--query", type=float, nargs=2, help="Query point", default=None
    )
    plot_parser.add_argument(
        "--save", type=str, help="Save figure instead of showing it", default=None
    )
    plot_parser.add_argument(
        "--rerun", action="store_true", help="Use rerun viewer", default=False
    )
    plot_parser.set_defaults(func=run_plot)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    # NOTE:
    # e.g.
    # kdindex build data.csv
    # kdindex query data.csv.kdtree data.csv queries.csv
    parser = create_parser()
    args = parser.parse_args(argv)

    config = KdIndexConfig.from_env()
    if args.delimiter is not None:
        config = replace(config, delimiter=args.delimiter)

    level = config.log_level
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    logging.basicConfig(level=level, format="%(message)s")

    try:
        return args.func(args, config)
    except KdTreeError as e:
        log.error("**ERROR** %s", e)
        return 1
    except OSError as e:
        log.error("**ERROR** %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
