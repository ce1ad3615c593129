"""Main CLI entry point for manifest-publisher."""

import sys

import uvloop

from manifest_publisher.cli import CLIRunner
from manifest_publisher.exceptions import ManifestPublisherError
from manifest_publisher.logger import flush_all_handlers, get_logger

logger = get_logger(__name__)


async def async_main() -> None:
    """Run the CLI asynchronously."""
    runner = CLIRunner()
    await runner.run()


def main() -> None:
    """Run the publisher and exit non-zero on failure.

    A publish error is reported as a single message; anything unexpected
    is logged with its traceback.
    """
    exit_code = 0
    try:
        uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("Publish cancelled by user")
        exit_code = 1
    except ManifestPublisherError as e:
        logger.error("%s", e)  # noqa: TRY400
        exit_code = 1
    except Exception:
        logger.exception("Unexpected error")
        exit_code = 1
    finally:
        flush_all_handlers()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
