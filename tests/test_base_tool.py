"""Tests for the BaseTool parameter validation."""

from __future__ import annotations

from typing import Any

import pytest

from pxo_toolbox.core.base_tool import BaseTool, ToolParameter
from pxo_toolbox.core.exceptions import ValidationError


class _EchoTool(BaseTool):
    name = "echo"
    display_name = "Echo"
    description = "Returns its parameters"

    def define_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="mode", default="a", choices=["a", "b"]),
            ToolParameter(name="size", default=4, min_value=1, max_value=8),
        ]

    def input_types(self) -> list[type]:
        return []

    def output_types(self) -> list[type]:
        return [dict]

    def _do_execute(self, params: dict[str, Any], input_data: Any) -> dict[str, Any]:
        return {"params": params, "input": input_data}


class TestBaseToolValidation:
    """Tests for ``BaseTool.validate`` and ``run``."""

    def test_run_passes_params_and_input(self) -> None:
        """Valid params reach ``_do_execute`` together with input data."""
        result = _EchoTool().run({"mode": "b", "size": 8}, input_data=3)
        assert result == {"params": {"mode": "b", "size": 8}, "input": 3}

    def test_rejects_unknown_choice(self) -> None:
        """Values outside ``choices`` are rejected."""
        with pytest.raises(ValidationError, match="must be one of"):
            _EchoTool().run({"mode": "z"})

    @pytest.mark.parametrize("size", [0, 9])
    def test_rejects_out_of_range(self, size: int) -> None:
        """``min_value`` and ``max_value`` are enforced."""
        with pytest.raises(ValidationError, match="size"):
            _EchoTool().run({"size": size})

    def test_missing_values_are_skipped(self) -> None:
        """Absent parameters are not validated."""
        _EchoTool().validate({})

    def test_run_fills_declared_defaults(self) -> None:
        """Parameters left out of ``run`` take their declared default."""
        result = _EchoTool().run({"mode": "b"})
        assert result["params"] == {"mode": "b", "size": 4}
