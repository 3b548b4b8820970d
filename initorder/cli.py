"""initorder CLI entry point."""
import argparse
import json
import logging
import sys

import yaml

from initorder.core.config import load_config
from initorder.core.errors import CircleDetected, GraphError, MissingDependency
from initorder.core.logging import setup_logging, get_run_id, timed


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='initorder - compute a safe initialization order from a YAML manifest')
    parser.add_argument('manifest', help='Path to YAML manifest of elements and dependencies')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Verbosity: -v=INFO, -vv=DEBUG')
    parser.add_argument('--json-logs', action='store_true',
                        help='Output logs in JSON format')
    parser.add_argument('--json', action='store_true', dest='json_output',
                        help='Print the order as a JSON array instead of one ID per line')
    return parser.parse_args(argv)


@timed
def resolve(config):
    graph = config.build_graph()
    return graph.init_order()


def _error_extra(error):
    if isinstance(error, MissingDependency):
        return {"dependency_id": error.dependency_id, "action": "init_order"}
    if isinstance(error, CircleDetected):
        return {"element_id": error.element_id, "action": "init_order"}
    return {"element_id": getattr(error, "element_id", None), "action": "add_element"}


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.manifest)
    except (OSError, ValueError, yaml.YAMLError) as e:
        setup_logging(args.verbose, args.json_logs)
        logging.error(f"Cannot read manifest {args.manifest}: {e}",
                      extra={"manifest": args.manifest})
        return 2

    # CLI args override manifest
    if args.verbose:
        config.verbosity = args.verbose
    if args.json_logs:
        config.json_logs = True

    setup_logging(config.verbosity, config.json_logs)
    logging.info(f"initorder run_id={get_run_id()} manifest={args.manifest}",
                 extra={"manifest": args.manifest})

    try:
        order = resolve(config)
    except GraphError as e:
        logging.error(f"No initialization order for {args.manifest}: {e}",
                      extra=_error_extra(e))
        return 1

    logging.info(f"Initialization order: {order}")
    if args.json_output:
        print(json.dumps(order))
    else:
        for element_id in order:
            print(element_id)
    return 0


if __name__ == '__main__':
    sys.exit(main())
