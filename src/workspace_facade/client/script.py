"""Google Apps Script facade."""
import logging
from typing import Any, Optional

from ..auth.connection import Connection
from ..utils.errors import ScriptExecutionError
from .base import FacadeBase

logger = logging.getLogger(__name__)


class ScriptFacade(FacadeBase):
    """Runs functions of a deployed Apps Script project."""

    SERVICE_NAME = 'script'
    SERVICE_VERSION = 'v1'

    def __init__(
        self,
        connection: Connection,
        script_id: Optional[str] = None,
        params: Optional[list[Any]] = None,
    ) -> None:
        super().__init__(connection)
        self.script_id = script_id
        self.params = list(params) if params else []

    def run_script(
        self,
        function_name: str,
        parameters: Optional[list[Any]] = None,
        dev_mode: bool = False,
    ) -> Any:
        """Execute a script function.

        Args:
            function_name: Name of the function in the script project.
            parameters: Arguments for the function; defaults to self.params.
            dev_mode: Run the most recently saved version instead of the
                deployed one (owner only).

        Returns:
            The function's return value, if any.

        Raises:
            ScriptExecutionError: If no script ID is set or the script
                reported an error.
        """
        if not self.script_id:
            raise ScriptExecutionError("No script ID configured")

        request = {
            'function': function_name,
            'parameters': self.params if parameters is None else parameters,
            'devMode': dev_mode,
        }
        response = self._service().scripts().run(
            scriptId=self.script_id, body=request
        ).execute()

        if 'error' in response:
            raise self._script_error(function_name, response['error'])

        return response.get('response', {}).get('result')

    def _script_error(self, function_name: str, error: dict[str, Any]) -> ScriptExecutionError:
        # details[0] holds the script-side error; it may carry no stack
        # trace if the script never started executing.
        details = (error.get('details') or [{}])[0]
        message = details.get('errorMessage') or error.get('message', 'Script execution failed')
        stack = [
            (trace.get('function', '?'), int(trace.get('lineNumber', 0)))
            for trace in details.get('scriptStackTraceElements', [])
        ]

        logger.error("Script error in %s: %s", function_name, message)
        for func, line in stack:
            logger.error("\t%s: %d", func, line)

        return ScriptExecutionError(message, error_type=details.get('errorType'), stack_trace=stack)
