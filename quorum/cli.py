"""
Command Line
Reconstructs the secret from each share container given on the command line.

Each file is processed independently: a failure is logged, the run is
marked as failed, and the next file is still attempted. The exit status
is 1 if any file failed and 0 otherwise.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from quorum import shares
from quorum.config import ReconstructionConfig
from quorum.errors import QuorumError
from quorum.selector import Strategy, reconstruct_detailed

logger = logging.getLogger(__name__)

DEFAULT_FILES = ["testcase1.json", "testcase2.json"]
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level: str = None):
    """
    Send log records to stderr with one handler on the root logger.

    ``level`` wins over $LOG_LEVEL. An unknown $LOG_LEVEL falls back to
    WARNING with a warning rather than aborting the run.
    """
    env_level = os.getenv("LOG_LEVEL")
    resolved = (level or env_level or DEFAULT_LOG_LEVEL).strip().upper()
    unknown = resolved not in LOG_LEVELS
    if unknown:
        resolved = DEFAULT_LOG_LEVEL

    root = logging.getLogger()
    root.setLevel(resolved)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    if unknown:
        logger.warning(
            "Ignoring unknown log level %r, using %s", level or env_level, DEFAULT_LOG_LEVEL
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quorum",
        description="Reconstruct threshold-shared secrets from share containers.",
    )
    parser.add_argument(
        "files", nargs="*", default=DEFAULT_FILES,
        help="Share container files (default: %(default)s)",
    )
    parser.add_argument(
        "--strategy", choices=[s.value for s in Strategy],
        help="Secret selection strategy (default: majority, or $QUORUM_STRATEGY)",
    )
    parser.add_argument("--workers", type=int, help="Worker processes for majority vote")
    parser.add_argument(
        "--max-combinations", type=int,
        help="Fail instead of trying more than this many combinations",
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS,
        help="Logging level (default: $LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--show-suspects", action="store_true",
        help="List shares that disagree with the recovered polynomial",
    )
    return parser


def _resolve_config(args) -> ReconstructionConfig:
    overrides = {
        "strategy": args.strategy,
        "workers": args.workers,
        "max_combinations": args.max_combinations,
    }
    overrides = {name: value for name, value in overrides.items() if value is not None}
    return replace(ReconstructionConfig.from_env(), **overrides)


def process_file(path: Path, config: ReconstructionConfig, show_suspects: bool = False) -> int:
    """Reconstruct one container and print its secret. Returns the secret."""
    if not path.exists():
        raise FileNotFoundError(f"File '{path}' not found")

    share_set = shares.load(path)
    result = reconstruct_detailed(
        share_set.points,
        share_set.threshold,
        config.strategy,
        **config.options(),
    )

    print(f"Secret: {result.secret}")
    if show_suspects:
        listed = ", ".join(str(x) for x in result.suspects) or "none"
        print(f"Suspect shares: {listed}")
    return result.secret


def main(argv: list[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = _resolve_config(args)
    except QuorumError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    all_successful = True
    for name in args.files:
        path = Path(name)
        print(f"Processing: {path}")
        try:
            process_file(path, config, args.show_suspects)
        except OSError as e:
            logger.error("Error reading file '%s': %s", path, e)
            all_successful = False
        except QuorumError as e:
            logger.error("Error processing file '%s': %s", path, e)
            all_successful = False
        print()

    if not all_successful:
        logger.error("Some files could not be processed successfully")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
