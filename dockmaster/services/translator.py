"""Base class shared by the resource translators."""

from dockmaster.core.errors import NotFoundError
from dockmaster.services.executor import CommandError, CommandExecutor, CommandResult

# Go template that makes list commands print one JSON object per line.
JSON_FORMAT = "{{json .}}"


class CliTranslator:
    """Runs runtime commands and maps "No such ..." failures to NotFoundError."""

    kind = "object"

    def __init__(self, executor: CommandExecutor) -> None:
        self._executor = executor

    def _run(self, args: list[str], ident: str | None = None) -> CommandResult:
        try:
            return self._executor.run(args)
        except CommandError as e:
            if ident is not None and e.is_not_found:
                raise NotFoundError(e.stderr or f"No such {self.kind}: {ident}") from e
            raise

    def _output(self, args: list[str], ident: str | None = None) -> str:
        return self._run(args, ident).stdout
