"""Action Chain: ordered, fail-fast execution of labelled steps.

A lifecycle operation (provision, start, stop, teardown) builds one
``ActionChain``, appends zero-argument operations to it and executes it once.
Execution is strictly sequential in insertion order and stops at the first
operation that returns ``Err``; that ``Err`` is returned to the caller as-is.

Stages are progress labels only. ``stage(label)`` changes the label attached
to actions added *afterwards*; the chain logs a ``chain.stage`` line whenever
execution crosses into a new label. Labels never affect control flow.

.. code-block:: text

    chain = ActionChain("docker")
    chain.stage("provisioning")        label = "provisioning"
    chain.add(create_symlink)          [0] provisioning
    chain.stage("provisioning in VM")  label = "provisioning in VM"
    chain.add(install_in_vm)           [1] provisioning in VM
    chain.execute()
      ├── chain.stage "provisioning"        → create_symlink()  Ok
      ├── chain.stage "provisioning in VM"  → install_in_vm()   Err(e)
      └── return Err(e)                       (nothing after [1] runs)

An operation that raises instead of returning is a failed step too: the
exception is returned as ``Err(exc)`` (the same exception object) and
execution stops.

Example::

    chain = ActionChain("docker").stage("starting")
    chain.add(lambda: guest.run(["sudo", "service", "docker", "start"]))
    chain.add(launch_agent.load)
    result = chain.execute()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from dockvm.core.errors import ChainAlreadyExecutedError
from dockvm.core.logging import get_logger
from dockvm.core.result import Err, Ok, Result

logger = get_logger(__name__)

Operation = Callable[[], Result[None]]


@dataclass(frozen=True)
class Action:
    """One step of a chain: an operation and the stage it was added under."""

    label: str
    operation: Operation

    @property
    def name(self) -> str:
        return getattr(self.operation, "__name__", repr(self.operation))


class ActionChain:
    """Single-use builder and executor of sequential actions.

    Parameters
    ----------
    name
        Chain owner, normally the runtime name; used in log events.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._stage = ""
        self._actions: list[Action] = []
        self._executed = False

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def stage(self, label: str) -> ActionChain:
        """Set the label for actions added from now on."""
        self._stage = label
        return self

    def add(self, operation: Operation) -> ActionChain:
        """Append ``operation`` to the end of the chain."""
        self._actions.append(Action(label=self._stage, operation=operation))
        return self

    @property
    def actions(self) -> list[Action]:
        return list(self._actions)

    @property
    def labels(self) -> list[str]:
        return [action.label for action in self._actions]

    @property
    def executed(self) -> bool:
        return self._executed

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self) -> Result[None]:
        """Run every action in order; return the first failure unchanged."""
        if self._executed:
            return Err(ChainAlreadyExecutedError(self.name))
        self._executed = True

        logger.debug("chain.start", chain=self.name, action_count=len(self._actions))

        current_label: str | None = None
        for index, action in enumerate(self._actions):
            if action.label and action.label != current_label:
                logger.info("chain.stage", chain=self.name, stage=action.label)
            current_label = action.label

            result = self._run(action)
            if result.is_err():
                logger.error(
                    "action.failed",
                    chain=self.name,
                    stage=action.label,
                    action=action.name,
                    index=index,
                    error=str(result.error),
                )
                return result

        logger.debug("chain.complete", chain=self.name, action_count=len(self._actions))
        return Ok(None)

    def _run(self, action: Action) -> Result[None]:
        try:
            result = action.operation()
        except Exception as exc:
            logger.exception("action.exception", chain=self.name, action=action.name)
            return Err(exc)
        if result is None:
            return Ok(None)
        return result

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"ActionChain({self.name!r}, actions={len(self._actions)})"


__all__ = [
    "Action",
    "ActionChain",
    "Operation",
]
