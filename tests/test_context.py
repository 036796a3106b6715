from __future__ import annotations

from pathlib import Path

import click
import pytest

from depbreakpoint.config import DepBreakpointConfig
from depbreakpoint.context import DepBreakpointContext, pass_context


@pytest.mark.unit
class TestDepBreakpointContext:
    """Tests for DepBreakpointContext class."""

    def test_default_initialization(self) -> None:
        ctx = DepBreakpointContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config is None

    def test_instances_are_independent(self) -> None:
        ctx1 = DepBreakpointContext()
        ctx2 = DepBreakpointContext()

        ctx1.verbose = 2
        ctx1.color = False

        assert ctx2.verbose == 0
        assert ctx2.color is True

    def test_all_attributes_can_be_set(self) -> None:
        ctx = DepBreakpointContext()
        config = DepBreakpointConfig(max_nodes=10)

        ctx.config_path = Path("/path/to/depbreakpoint.toml")
        ctx.verbose = 2
        ctx.color = False
        ctx.config = config

        assert ctx.config_path == Path("/path/to/depbreakpoint.toml")
        assert ctx.verbose == 2
        assert ctx.color is False
        assert ctx.config is config

    def test_slots_prevents_arbitrary_attributes(self) -> None:
        ctx = DepBreakpointContext()

        with pytest.raises(AttributeError):
            ctx.registry = "https://registry.npmjs.org"  # type: ignore


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_injects_existing_context(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: DepBreakpointContext) -> DepBreakpointContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        existing = DepBreakpointContext()
        click_ctx.obj = existing

        assert click_ctx.invoke(command) is existing

    def test_creates_context_when_missing(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: DepBreakpointContext) -> DepBreakpointContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))

        result = click_ctx.invoke(command)

        assert isinstance(result, DepBreakpointContext)
        assert result.config is None
