"""CLI runner for manifest-publisher.

Builds the inputs from environment and arguments, wires the HTTP session,
GitHub client and checksum computer together, and runs the workflow.
"""

from collections.abc import Mapping, Sequence

from manifest_publisher import __version__
from manifest_publisher.config import PublishInputs
from manifest_publisher.core.auth import GitHubAuthManager
from manifest_publisher.core.checksum import ChecksumComputer
from manifest_publisher.core.http_session import create_http_session
from manifest_publisher.core.protocols import EventSink, LoggerEventSink
from manifest_publisher.infrastructure.github import GitHubClient
from manifest_publisher.logger import get_logger
from manifest_publisher.workflows import PublishOutcome, PublishWorkflow

from .parser import CLIParser, overrides_from_args

logger = get_logger(__name__)


class CLIRunner:
    """Parse inputs and execute one publish run."""

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
        events: EventSink | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            argv: Command line arguments; ``sys.argv[1:]`` when None
            environ: Environment mapping; ``os.environ`` when None
            events: Event sink; step events are logged when None

        """
        self.args = CLIParser().parse_args(argv)
        self.environ = environ
        self.events = events or LoggerEventSink()

    def build_inputs(self) -> PublishInputs:
        """Merge environment inputs with command line overrides."""
        inputs = PublishInputs.from_environment(self.environ)
        return inputs.with_overrides(overrides_from_args(self.args))

    async def run(self) -> PublishOutcome | None:
        """Run the publish workflow.

        Returns:
            The outcome, or None when only version info was requested

        """
        if self.args.version_info:
            print(f"manifest-publisher {__version__}")  # noqa: T201
            return None

        inputs = self.build_inputs()
        # Fail on missing inputs before opening any connection
        inputs.validate()

        auth_manager = GitHubAuthManager(inputs.token)
        async with create_http_session() as session:
            client = GitHubClient(session, auth_manager)
            workflow = PublishWorkflow(
                client, ChecksumComputer(session), self.events
            )
            outcome = await workflow.run(inputs)

        logger.debug("Publish finished for %s", inputs.package_id)
        return outcome
