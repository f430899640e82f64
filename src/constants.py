"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONFIG_ERROR = 2
    RESOLUTION_FAILED = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PACKAGE_JSON_FILE = "package.json"
    IISNODE_YML_FILE = "iisnode.yml"
    NODE_PROCESS_COMMAND_LINE_KEY = "nodeProcessCommandLine"
    NODE_EXECUTABLE = "node.exe"
    LOG_FORMAT = "[%(levelname)s] %(message)s"

    # Host runtime configuration (overridden by config file, env and CLI)
    RUNTIMES_DIR = None
    AVAILABLE_VERSIONS = []
    DEFAULT_NODE_VERSION = None

    ENV_RUNTIMES_DIR = "NODESELECT_RUNTIMES_DIR"
    ENV_DEFAULT_VERSION = "NODESELECT_DEFAULT_VERSION"
    ENV_LOG_LEVEL = "NODESELECT_LOG_LEVEL"

    # Build log messages, one per terminal decision
    MSG_OVERRIDE = (
        "The iisnode.yml file explicitly sets nodeProcessCommandLine. "
        "Automatic node.js version selection is turned off."
    )
    MSG_NO_PACKAGE_JSON = (
        "The package.json file is not present. "
        "The node.js application will run with the default node.js version {default}."
    )
    MSG_NO_CONSTRAINT = (
        "The package.json file does not specify node.js engine version constraints. "
        "The node.js application will run with the default node.js version {default}."
    )
    MSG_SELECTED = (
        "Selected node.js version {version}. "
        "Use package.json file to choose a different version."
    )
    MSG_NO_MATCH = (
        "No available node.js version matches application's version constraint of "
        "'{constraint}'. Use package.json to choose one of the available versions "
        "of node.js ({available})."
    )
