"""Unit tests for the Apps Script facade."""

from unittest.mock import MagicMock, Mock

import pytest

from workspace_facade.client import ScriptFacade
from workspace_facade.utils.errors import ScriptExecutionError


class TestRunScript:
    """Tests for ScriptFacade.run_script()."""

    def setup_method(self):
        self.service = MagicMock()
        self.scripts = self.service.scripts.return_value
        self.connection = Mock()
        self.connection.build_service.return_value = self.service

    def test_returns_function_result(self):
        self.scripts.run.return_value.execute.return_value = {
            "done": True, "response": {"result": ["Sheet1", "Sheet2"]}
        }
        facade = ScriptFacade(self.connection, "script-1", ["abc"])

        assert facade.run_script("getSheetNames") == ["Sheet1", "Sheet2"]
        self.scripts.run.assert_called_once_with(
            scriptId="script-1",
            body={"function": "getSheetNames", "parameters": ["abc"], "devMode": False},
        )
        self.connection.build_service.assert_called_once_with("script", "v1")

    def test_explicit_parameters_and_dev_mode(self):
        self.scripts.run.return_value.execute.return_value = {"response": {}}
        facade = ScriptFacade(self.connection, "script-1", ["default"])

        assert facade.run_script("sync", [1, 2], dev_mode=True) is None
        body = self.scripts.run.call_args.kwargs["body"]
        assert body["parameters"] == [1, 2]
        assert body["devMode"] is True

    def test_script_error_is_raised(self):
        self.scripts.run.return_value.execute.return_value = {
            "error": {
                "code": 3,
                "message": "ScriptError",
                "details": [{
                    "@type": "type.googleapis.com/google.apps.script.v1.ExecutionError",
                    "errorMessage": "TypeError: Cannot read property 'x'",
                    "errorType": "TypeError",
                    "scriptStackTraceElements": [
                        {"function": "helper", "lineNumber": 12},
                        {"function": "main", "lineNumber": 3},
                    ],
                }],
            }
        }
        facade = ScriptFacade(self.connection, "script-1")

        with pytest.raises(ScriptExecutionError) as exc_info:
            facade.run_script("main")

        error = exc_info.value
        assert error.message == "TypeError: Cannot read property 'x'"
        assert error.error_type == "TypeError"
        assert error.stack_trace == [("helper", 12), ("main", 3)]

    def test_error_without_details(self):
        self.scripts.run.return_value.execute.return_value = {
            "error": {"message": "Script not found"}
        }

        with pytest.raises(ScriptExecutionError, match="Script not found") as exc_info:
            ScriptFacade(self.connection, "script-1").run_script("main")
        assert exc_info.value.stack_trace == []

    def test_missing_script_id(self):
        with pytest.raises(ScriptExecutionError):
            ScriptFacade(self.connection).run_script("main")
        self.connection.build_service.assert_not_called()
