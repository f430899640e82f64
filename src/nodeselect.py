"""NodeSelect - node.js runtime version selection for git deployments

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import ExitCodes
from common.logging_utils import configure_logging
from args import parse_args
from cli_config import build_registry, configure_runtimes
from versioning.models import NodeSelectError
from versioning.service import DeploymentLog, select_node_version


def _setup_logging(args):
    """Configure logging based on CLI arguments."""
    level_name = getattr(args, "LOG_LEVEL", None)
    if level_name:
        configure_logging(getattr(logging, str(level_name).upper(), logging.INFO))
    else:
        # Falls back to NODESELECT_LOG_LEVEL, then INFO
        configure_logging(None)

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
        logging.info("Logging to file: %s", log_file)


def export_json(outcome, path):
    """Exports the selection outcome to a JSON file.

    Args:
        outcome (DeploymentOutcome): Result of the selection step.
        path (str): File path to export the JSON.
    """
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(outcome.to_dict(), file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if not os.path.isdir(args.FROM_SRC):
        logging.error("Working tree not found: %s, aborting", args.FROM_SRC)
        sys.exit(ExitCodes.FILE_ERROR.value)

    configure_runtimes(args)
    try:
        registry = build_registry()
    except NodeSelectError as e:
        logging.error("Runtime configuration error: %s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)
    logging.debug("Using %r", registry)

    log = DeploymentLog(None if args.QUIET else sys.stdout)
    outcome = select_node_version(args.FROM_SRC, registry, log)

    if args.OUTPUT:
        export_json(outcome, args.OUTPUT)

    if not outcome.succeeded:
        logging.error("Node.js version selection failed, aborting deployment.")
        sys.exit(ExitCodes.RESOLUTION_FAILED.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
