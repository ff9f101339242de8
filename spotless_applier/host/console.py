"""
Console host.

Rich-based notification sink and module selectors for the command line.
"""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..core.logging import get_logger
from ..models.selection import SelectionResult, SelectionState
from ..storage import SelectionStore
from .interface import ModuleSelector, NotificationLevel, NotificationSink

logger = get_logger(__name__)

_LEVEL_STYLES = {
    NotificationLevel.INFO: ("green", "✓"),
    NotificationLevel.WARNING: ("yellow", "!"),
    NotificationLevel.ERROR: ("bold red", "✗"),
}


class ConsoleNotificationSink(NotificationSink):
    """Prints notifications to the console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        style, marker = _LEVEL_STYLES[level]
        logger.debug("Notification", level=level.value, message=message)
        self.console.print(f"[{style}]{marker} {escape(message)}[/{style}]")


class StaticModuleSelector(ModuleSelector):
    """Answers from command-line flags instead of asking."""

    def __init__(
        self,
        modules: list[str] | None = None,
        apply_to_root: bool = False,
        select_all: bool = False,
    ) -> None:
        self.modules = list(modules or [])
        self.apply_to_root = apply_to_root
        self.select_all = select_all

    async def choose(self, candidates: list[str], has_root: bool) -> SelectionResult:
        if self.apply_to_root and has_root:
            return SelectionResult(confirmed=True, apply_to_root=True)

        chosen = list(candidates) if self.select_all else list(self.modules)
        if not chosen:
            logger.warning("No module matched the requested selection", requested=self.modules)
            return SelectionResult.cancelled()
        return SelectionResult(confirmed=True, chosen=chosen)


class ConsoleModuleSelector(ModuleSelector):
    """Interactive module choice.

    The previously confirmed selection of the project is offered as the
    default and replaced by the new one once confirmed.
    """

    def __init__(
        self,
        project_path: str,
        store: SelectionStore | None = None,
        console: Console | None = None,
    ) -> None:
        self.project_path = project_path
        self.store = store
        self.console = console or Console()

    async def choose(self, candidates: list[str], has_root: bool) -> SelectionResult:
        previous = await self.store.load(self.project_path) if self.store else None

        table = Table(title="Available modules")
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Module")
        for index, name in enumerate(candidates, start=1):
            table.add_row(str(index), name)
        self.console.print(table)

        # rich prompts block on stdin, keep them off the event loop
        if has_root and await asyncio.to_thread(
            Confirm.ask,
            "Apply on root project?",
            default=previous.apply_to_root if previous else False,
            console=self.console,
        ):
            result = SelectionResult(confirmed=True, apply_to_root=True)
        else:
            default = ""
            if previous:
                default = ",".join(name for name in previous.selected_modules if name in candidates)
            answer = await asyncio.to_thread(
                Prompt.ask,
                "Modules to reformat (numbers or names, comma-separated; empty cancels)",
                default=default or None,
                console=self.console,
            )
            chosen = self.parse_answer(answer or "", candidates)
            if not chosen:
                return SelectionResult.cancelled()
            result = SelectionResult(confirmed=True, chosen=chosen)

        if self.store:
            await self.store.save(
                SelectionState(
                    project_path=self.project_path,
                    selected_modules=result.chosen,
                    apply_to_root=result.apply_to_root,
                )
            )
        return result

    def parse_answer(self, answer: str, candidates: list[str]) -> list[str]:
        """Map ``"1, core"`` style answers onto candidate names, keeping order."""
        chosen: list[str] = []
        for token in (part.strip() for part in answer.split(",")):
            if not token:
                continue
            if token.isdigit() and 1 <= int(token) <= len(candidates):
                name = candidates[int(token) - 1]
            elif token in candidates:
                name = token
            else:
                self.console.print(f"[yellow]Unknown module: {escape(token)}[/yellow]")
                continue
            if name not in chosen:
                chosen.append(name)
        return chosen
