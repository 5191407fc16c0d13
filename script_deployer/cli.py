"""Command-line entry point for the script deployer."""
import argparse
import sys

from .config import DEFAULT_SERVER, LOG_DIR, LOG_LEVEL
from .deploy_logger import get_logger
from .errors import FatalDeployError
from .script_client import DeployTarget, ScriptClient
from .watcher_service import DeployOrchestrator

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off"}


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="script-deployer",
        description="Deploy a script file to the server and redeploy it on every change",
    )
    parser.add_argument("-u", "--uri", required=True, help="Resource identifier of the script on the server")
    parser.add_argument("-f", "--file", required=True, help="Path to the script file to deploy")
    parser.add_argument(
        "-s", "--server",
        default=DEFAULT_SERVER,
        help="Server URL (default: %(default)s)",
    )
    parser.add_argument(
        "-w", "--watch",
        type=parse_bool,
        nargs="?",
        const=True,
        default=True,
        help="Keep watching for file changes after the first deployment (default: true)",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-dir",
        default=LOG_DIR,
        help="Directory for the log file and JSON deploy journal (default: console only)",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logger = get_logger(log_dir=args.log_dir, log_level=args.log_level)
    target = DeployTarget(server=args.server, uri=args.uri, file_path=args.file)

    try:
        client = ScriptClient(logger)
        try:
            orchestrator = DeployOrchestrator(target, client, logger)
            return orchestrator.run(watch=args.watch)
        finally:
            client.close()
    except FatalDeployError as e:
        logger.log_system_event(f"Exiting: {e}", "DEBUG")
        return 1


if __name__ == "__main__":
    sys.exit(main())
