"""Apps Script MCP tools."""
import json
from typing import Optional

from googleapiclient.errors import HttpError

from .main import mcp, require_token
from ..client import ScriptFacade
from ..utils.errors import handle_http_error, format_error, WorkspaceFacadeError, ScriptExecutionError


@mcp.tool()
def run_apps_script(
    script_id: str,
    function_name: str,
    parameters: Optional[str] = None,
    dev_mode: bool = False,
) -> str:
    """
    Run a function of a deployed Apps Script project.
    Args:
        script_id: ID of the script project (or its API executable deployment).
        function_name: Name of the function to run.
        parameters: Optional JSON array of arguments, e.g. '["a", 2]'.
        dev_mode: Run the latest saved version instead of the deployment.
    """
    try:
        args = json.loads(parameters) if parameters else []
        if not isinstance(args, list):
            return "Run script failed: Parameters must be a JSON array."

        result = ScriptFacade(require_token(), script_id).run_script(function_name, args, dev_mode)
        if result is None:
            return f"{function_name} finished without a return value."
        return json.dumps(result, indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return "Run script failed: Invalid JSON array format."
    except ScriptExecutionError as e:
        lines = [format_error("Run script", e)]
        lines.extend(f"  at {func}:{line}" for func, line in e.stack_trace)
        return "\n".join(lines)
    except HttpError as e:
        return format_error("Run script", handle_http_error(e, script_id))
    except WorkspaceFacadeError as e:
        return format_error("Run script", e)
    except Exception as e:
        return f"Run script failed: Unexpected error ({type(e).__name__}: {e})"
