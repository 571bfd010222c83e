"""Base class for filters that run an external command-line tool."""

import io
import logging
import threading
from pathlib import Path
from typing import BinaryIO, ClassVar

from media_filter.config import Configuration
from media_filter.exceptions import ConfigurationError
from media_filter.exit_status import ExitStatus, classify_exit_status
from media_filter.process import ProcessResult, run_process
from media_filter.staging import staged_copy

from .media_filter import MediaFilter

logger = logging.getLogger(__name__)

COMMAND_PLACEHOLDER = "@COMMAND@"
INFILE_PLACEHOLDER = "@infile@"

DEFAULT_TIMEOUT = 300.0


class SubprocessFilter(MediaFilter):
    """A filter that stages its source to a file and captures a tool's stdout.

    Subclasses set the class attributes below. The executable path is looked
    up from configuration on first use and cached for the life of the
    instance.

    Attributes:
        command_template: Argument vector with @COMMAND@ and @infile@ placeholders
        config_key: Configuration key holding the path to the executable
        tool_name: Name of the tool, for messages
        staging_suffix: Suffix for the staging file name
    """

    command_template: ClassVar[tuple[str, ...]] = ()
    config_key: ClassVar[str] = ""
    tool_name: ClassVar[str] = ""
    staging_suffix: ClassVar[str] = ""

    def __init__(self, config: Configuration | None = None):
        super().__init__(config)
        self._executable: str | None = None
        self._executable_lock = threading.Lock()

    @property
    def executable(self) -> str:
        """Path to the external tool, resolved once from configuration.

        Raises:
            ConfigurationError: If the configuration has no value for config_key
        """
        if self._executable is None:
            with self._executable_lock:
                if self._executable is None:
                    path = self.config.get_property(self.config_key)
                    if not path:
                        raise ConfigurationError(
                            f"No value for key \"{self.config_key}\" in configuration! "
                            f"Should be path to {self.tool_name} executable."
                        )
                    self._executable = str(path)
        return self._executable

    @property
    def timeout(self) -> float | None:
        """Seconds to wait for the tool; None when filter.timeout is 0 or less."""
        seconds = self.config.get_float("filter.timeout", DEFAULT_TIMEOUT)
        return seconds if seconds > 0 else None

    @property
    def staging_dir(self) -> Path | None:
        directory = self.config.get_property("filter.staging_dir")
        return Path(directory) if directory else None

    def build_command(self, executable: str, infile: Path) -> list[str]:
        """Fill the command template for one staging file."""
        substitutions = {
            COMMAND_PLACEHOLDER: executable,
            INFILE_PLACEHOLDER: str(infile),
        }
        return [substitutions.get(arg, arg) for arg in self.command_template]

    def classify(self, returncode: int) -> ExitStatus:
        return classify_exit_status(returncode)

    def failure_message(self, status: ExitStatus, result: ProcessResult, infile: Path) -> str:
        """Describe a failed run; subclasses word this for their tool."""
        return f"{self.tool_name} failed, status={result.returncode}: file={infile}"

    def get_destination_stream(self, source: BinaryIO, verbose: bool = False) -> BinaryIO:
        try:
            executable = self.executable
        except ConfigurationError:
            source.close()
            raise

        with staged_copy(source, suffix=self.staging_suffix, directory=self.staging_dir) as infile:
            command = self.build_command(executable, infile)
            logger.log(
                logging.INFO if verbose else logging.DEBUG,
                f"Running command: {command}",
            )

            result = run_process(command, timeout=self.timeout)
            status = self.classify(result.returncode)

            if status is not ExitStatus.SUCCESS:
                message = self.failure_message(status, result, infile)
                logger.error(message)
                if result.stderr:
                    logger.debug(f"{self.tool_name} stderr: {result.stderr!r}")
                raise status.error_class(
                    message, exit_code=result.returncode, status=status
                )

        if verbose:
            logger.info(f"{self.tool_name} produced {len(result.stdout)} bytes")
        return io.BytesIO(result.stdout)
