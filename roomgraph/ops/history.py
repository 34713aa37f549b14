from __future__ import annotations

import logging
from typing import List, Optional

from roomgraph.geometry.tolerance import DEFAULT_HISTORY_SIZE
from roomgraph.graph.store import GraphStore, create_empty_graph
from roomgraph.ops.commands import Command, CommandState

logger = logging.getLogger(__name__)


class CommandHistory:
    """Linear undo/redo over executed commands.

    ``index`` points at the last applied command (-1 when nothing is applied).
    Executing after an undo discards the redo tail.
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if int(max_size) < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = int(max_size)
        self._commands: List[Command] = []
        self._index = -1

    def execute(self, command: Command, state: CommandState) -> CommandState:
        new_state = command.execute(state)
        del self._commands[self._index + 1 :]
        self._commands.append(command)
        self._index += 1
        if len(self._commands) > self.max_size:
            self._commands.pop(0)
            self._index -= 1
        logger.info("Executed: %s", command.description())
        return new_state

    def undo(self, state: CommandState) -> Optional[CommandState]:
        if not self.can_undo():
            return None
        command = self._commands[self._index]
        new_state = command.undo(state)
        self._index -= 1
        logger.info("Undone: %s", command.description())
        return new_state

    def redo(self, state: CommandState) -> Optional[CommandState]:
        if not self.can_redo():
            return None
        self._index += 1
        command = self._commands[self._index]
        new_state = command.execute(state)
        logger.info("Redone: %s", command.description())
        return new_state

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._commands) - 1

    def size(self) -> int:
        return len(self._commands)

    @property
    def index(self) -> int:
        return self._index

    def clear(self) -> None:
        self._commands = []
        self._index = -1

    def undo_description(self) -> Optional[str]:
        if not self.can_undo():
            return None
        return self._commands[self._index].description()

    def redo_description(self) -> Optional[str]:
        if not self.can_redo():
            return None
        return self._commands[self._index + 1].description()


class EditSession:
    """One editable floor plan: current state plus its history."""

    def __init__(self, graph: Optional[GraphStore] = None, *, max_history: int = DEFAULT_HISTORY_SIZE) -> None:
        self.state = CommandState(graph=graph if graph is not None else create_empty_graph())
        self.history = CommandHistory(max_size=max_history)

    @property
    def graph(self) -> GraphStore:
        return self.state.graph

    def run(self, command: Command) -> CommandState:
        self.state = self.history.execute(command, self.state)
        return self.state

    def undo(self) -> bool:
        new_state = self.history.undo(self.state)
        if new_state is None:
            return False
        self.state = new_state
        return True

    def redo(self) -> bool:
        new_state = self.history.redo(self.state)
        if new_state is None:
            return False
        self.state = new_state
        return True
