"""Argument parsing functionality for NodeSelect."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="nodeselect",
        description=(
            "NodeSelect - choose the node.js runtime for a deployment from "
            "package.json and iisnode.yml"
        ),
        add_help=True,
    )

    parser.add_argument("-d", "--directory",
                        dest="FROM_SRC",
                        help="Deployment working tree containing package.json / iisnode.yml",
                        action="store",
                        type=str,
                        required=True)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to host configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--runtimes-dir",
                        dest="RUNTIMES_DIR",
                        help="Directory with one subdirectory per installed node.js version",
                        action="store",
                        type=str)
    parser.add_argument("--available",
                        dest="AVAILABLE",
                        help="Installed node.js version (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--default-version",
                        dest="DEFAULT_VERSION",
                        help="node.js version used when automatic selection does not apply",
                        action="store",
                        type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to JSON file receiving the selection result",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: NODESELECT_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not write the build log to stdout.",
                        action="store_true")

    return parser.parse_args(argv)
