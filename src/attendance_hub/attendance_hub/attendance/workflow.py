from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, List, Optional, Tuple

from ..common.datetime_utils import Clock, format_clock_time, now_local
from ..core.enums import EntryMethod, GuardianType, WorkflowState
from ..core.exceptions import ValidationError, WorkflowStateError, WriteFailed
from ..roster.model import Person
from .factory import decide_next_action
from .model import AttendanceWrite, DerivedAttendanceView, GuardianOption, Operator, PendingAction
from .overlay import apply_commit

logger = logging.getLogger(__name__)

Writer = Callable[[AttendanceWrite], None]


@dataclass(frozen=True)
class Transition:
    source: WorkflowState
    target: WorkflowState
    event: str


@dataclass(frozen=True)
class CommitOutcome:
    write: AttendanceWrite
    view: DerivedAttendanceView


def guardian_options(person: Person) -> List[GuardianOption]:
    """Candidates in fixed order; unnamed ones are dropped, Captain is always offered."""

    candidates = [
        GuardianOption(GuardianType.FATHER, person.father_name or "", person.father_photo),
        GuardianOption(GuardianType.MOTHER, person.mother_name or "", person.mother_photo),
        GuardianOption(GuardianType.GUARDIAN, person.guardian_name or "", person.guardian_photo),
        GuardianOption(GuardianType.CAPTAIN, GuardianType.CAPTAIN.value),
    ]
    return [c for c in candidates if c.name.strip()]


class GuardianWorkflow:
    """State machine for one operator's guardian-attributed check-in/out.

    IDLE -> ACTION_SELECTED -> GUARDIAN_PENDING -> COMMITTING -> IDLE,
    or GUARDIAN_PENDING -> IDLE on cancel. Every transition is appended to
    `trace`.
    """

    def __init__(self, *, clock: Clock = now_local):
        self._clock = clock
        self._state = WorkflowState.IDLE
        self._pending: Optional[PendingAction] = None
        self._options: Tuple[GuardianOption, ...] = ()
        self.trace: List[Transition] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def pending(self) -> Optional[PendingAction]:
        return self._pending

    @property
    def options(self) -> List[GuardianOption]:
        return list(self._options)

    def _move(self, expected: WorkflowState, target: WorkflowState, event: str) -> None:
        if self._state != expected:
            raise WorkflowStateError(f"{event}: expected {expected.value}, workflow is {self._state.value}")
        self.trace.append(Transition(self._state, target, event))
        self._state = target

    def _discard(self) -> None:
        self._pending = None
        self._options = ()

    def select(self, view: DerivedAttendanceView, method: EntryMethod) -> PendingAction:
        """A tap or resolved scan: capture the person and infer IN/OUT."""

        decision = decide_next_action(view)
        self._move(WorkflowState.IDLE, WorkflowState.ACTION_SELECTED, "select")
        self._pending = PendingAction(view=view, action_type=decision.action, method=method, prompt=decision.prompt)
        logger.debug("Selected %s for %s via %s", decision.action.value, view.person.display_name, method.value)
        return self._pending

    def present_guardians(self) -> List[GuardianOption]:
        if self._pending is None:
            raise WorkflowStateError("present_guardians without a pending action")
        self._move(WorkflowState.ACTION_SELECTED, WorkflowState.GUARDIAN_PENDING, "present_guardians")
        self._options = tuple(guardian_options(self._pending.person))
        return list(self._options)

    def cancel(self) -> None:
        self._move(WorkflowState.GUARDIAN_PENDING, WorkflowState.IDLE, "cancel")
        self._discard()

    def choose_guardian(
        self,
        guardian_type: GuardianType,
        *,
        work_date: date,
        operator: Operator,
        write: Writer,
    ) -> CommitOutcome:
        """Record the guardian and immediately issue exactly one write.

        The pending action is discarded whether the write succeeds or fails.
        """

        if self._state != WorkflowState.GUARDIAN_PENDING:
            raise WorkflowStateError(f"choose_guardian: workflow is {self._state.value}")
        option = next((o for o in self._options if o.guardian_type == guardian_type), None)
        if option is None:
            raise ValidationError(f"{guardian_type.value} is not an offered guardian")

        self._pending = replace(self._pending, guardian=option)
        self._move(WorkflowState.GUARDIAN_PENDING, WorkflowState.COMMITTING, "choose_guardian")
        try:
            return self._commit(work_date=work_date, operator=operator, write=write)
        finally:
            self._discard()

    def _commit(self, *, work_date: date, operator: Operator, write: Writer) -> CommitOutcome:
        pending = self._pending
        if pending is None or pending.guardian is None:
            raise WorkflowStateError("commit without a selected guardian")

        person = pending.person
        if person.write_key is None:
            self._move(WorkflowState.COMMITTING, WorkflowState.IDLE, "commit_invalid")
            raise ValidationError("No valid identifier found for this person")

        request = AttendanceWrite(
            person_key=person.write_key,
            date=work_date,
            action=pending.action_type,
            time=format_clock_time(self._clock()),
            guardian_type=pending.guardian.guardian_type,
            guardian_name=pending.guardian.name,
            marked_by_name=operator.name,
            marked_by_role=operator.role,
        )
        try:
            write(request)
        except WriteFailed:
            self._move(WorkflowState.COMMITTING, WorkflowState.IDLE, "commit_failed")
            raise
        except Exception:
            self._move(WorkflowState.COMMITTING, WorkflowState.IDLE, "commit_error")
            raise
        self._move(WorkflowState.COMMITTING, WorkflowState.IDLE, "commit_succeeded")
        logger.info(
            "Marked %s %s at %s by %s",
            person.display_name, request.action.value, request.time, request.guardian_name,
        )
        return CommitOutcome(write=request, view=apply_commit(pending.view, request))
