from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..common.datetime_utils import Clock, now_local
from ..common.poller import RefreshPoller
from ..core.constants import MAX_OPEN_BOARDS
from ..core.enums import EntryMethod, GuardianType, WorkflowState
from ..core.exceptions import CommitInFlight, PersonNotFound, SourceUnavailable, ValidationError
from ..roster.merge import identity_key
from ..roster.model import Person
from ..roster.service import RosterService
from .model import DailySummary, DerivedAttendanceView, GuardianOption, Operator, PendingAction
from .overlay import apply_attendance_overlay, baseline_views, search_views, summarize
from .repository import AttendanceEventRepository
from .resolver import NotFound, resolve_person
from .workflow import CommitOutcome, GuardianWorkflow

logger = logging.getLogger(__name__)

BoardKey = Tuple[Optional[int], date]


class AttendanceBoard:
    """Derived attendance views for one (branch, date) pair.

    Refreshes are tagged with a sequence number; a response is applied only
    if no newer refresh started meanwhile. Optimistic commits are kept as
    per-person overrides until the next applied refresh replaces them.
    """

    def __init__(
        self,
        *,
        branch_id: Optional[int],
        work_date: date,
        roster: RosterService,
        events: AttendanceEventRepository,
    ):
        self.branch_id = branch_id
        self.work_date = work_date
        self._roster = roster
        self._events = events
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._base: Tuple[DerivedAttendanceView, ...] = ()
        self._overrides: Dict[str, DerivedAttendanceView] = {}
        self._poller: Optional[RefreshPoller] = None

    @property
    def key(self) -> BoardKey:
        return (self.branch_id, self.work_date)

    @property
    def loaded(self) -> bool:
        return self._applied > 0

    def views(self) -> List[DerivedAttendanceView]:
        with self._lock:
            return [self._overrides.get(identity_key(v.person), v) for v in self._base]

    def begin_refresh(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def complete_refresh(self, seq: int, views: Sequence[DerivedAttendanceView]) -> bool:
        with self._lock:
            if seq != self._issued:
                logger.debug("Dropping stale refresh %d (latest %d) for %s", seq, self._issued, self.key)
                return False
            self._base = tuple(views)
            self._overrides = {}
            self._applied = seq
            return True

    def fetch_views(self) -> List[DerivedAttendanceView]:
        roster = self._roster.load_roster(branch_id=self.branch_id)
        try:
            events = self._events.list_for_date(self.work_date, branch_id=self.branch_id)
        except SourceUnavailable as exc:
            logger.warning("Attendance overlay skipped for %s: %s", self.key, exc)
            return baseline_views(roster)
        return apply_attendance_overlay(roster, events)

    def refresh(self) -> bool:
        seq = self.begin_refresh()
        return self.complete_refresh(seq, self.fetch_views())

    def apply_optimistic(self, view: DerivedAttendanceView) -> None:
        with self._lock:
            self._overrides = {**self._overrides, identity_key(view.person): view}

    def find(self, person: Person) -> Optional[DerivedAttendanceView]:
        key = identity_key(person)
        return next((v for v in self.views() if identity_key(v.person) == key), None)

    def find_by_id(self, person_ref: str) -> Optional[DerivedAttendanceView]:
        """Look up a tapped row by its `key`, then roster code, then numeric id.

        Two merged people can share a raw id, so a ref that matches more than
        one row at the same step is rejected rather than guessed.
        """

        ref = str(person_ref).strip()
        views = self.views()
        probes = (
            lambda p: identity_key(p) == ref,
            lambda p: p.external_code == ref,
            lambda p: p.has_usable_id and str(p.id) == ref,
        )
        for probe in probes:
            matches = [v for v in views if probe(v.person)]
            if len(matches) > 1:
                raise ValidationError(f"{ref!r} matches {len(matches)} people; select the row by its key")
            if matches:
                return matches[0]
        return None

    def search(self, query: Optional[str]) -> List[DerivedAttendanceView]:
        return search_views(self.views(), query)

    def summary(self, views: Optional[Sequence[DerivedAttendanceView]] = None) -> DailySummary:
        return summarize(self.views() if views is None else views)

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    def start_polling(self, interval_seconds: float) -> None:
        if self._poller is None:
            self._poller = RefreshPoller(self.refresh, interval_seconds, name=f"board-{self.branch_id}-{self.work_date}")
        self._poller.start()

    def close(self) -> None:
        if self._poller is not None:
            self._poller.stop(timeout=1.0)
            self._poller = None


class AttendanceService:
    """Entry point for the attendance screens.

    Owns the boards, one guardian workflow per operator session, and the
    per-person in-flight guard that keeps commits to one at a time.
    """

    def __init__(
        self,
        roster: RosterService,
        events: AttendanceEventRepository,
        *,
        clock: Clock = now_local,
        poll_interval_seconds: float = 0,
        max_open_boards: int = MAX_OPEN_BOARDS,
    ):
        self._roster = roster
        self._events = events
        self._clock = clock
        self._poll_interval = float(poll_interval_seconds or 0)
        self._max_open_boards = max(1, int(max_open_boards))
        # Least recently used first.
        self._boards: "OrderedDict[BoardKey, AttendanceBoard]" = OrderedDict()
        self._workflows: Dict[str, GuardianWorkflow] = {}
        self._in_flight: Set[str] = set()
        self._lock = threading.Lock()

    def board(self, *, branch_id: Optional[int], work_date: Optional[date] = None) -> AttendanceBoard:
        work_date = work_date or self._clock().date()
        key = (branch_id, work_date)
        evicted: List[AttendanceBoard] = []
        with self._lock:
            board = self._boards.get(key)
            if board is None:
                board = AttendanceBoard(branch_id=branch_id, work_date=work_date, roster=self._roster, events=self._events)
                self._boards[key] = board
                if self._poll_interval > 0:
                    board.start_polling(self._poll_interval)
            self._boards.move_to_end(key)
            while len(self._boards) > self._max_open_boards:
                _, stale = self._boards.popitem(last=False)
                evicted.append(stale)

        for stale in evicted:
            logger.info("Closing idle board %s", stale.key)
            stale.close()
        return board

    def open_board(self, *, branch_id: Optional[int], work_date: Optional[date] = None) -> AttendanceBoard:
        board = self.board(branch_id=branch_id, work_date=work_date)
        board.refresh()
        return board

    def close_board(self, board: AttendanceBoard) -> None:
        with self._lock:
            self._boards.pop(board.key, None)
        board.close()

    def workflow(self, operator_key: str) -> GuardianWorkflow:
        with self._lock:
            wf = self._workflows.get(operator_key)
            if wf is None:
                wf = GuardianWorkflow(clock=self._clock)
                self._workflows[operator_key] = wf
            return wf

    def _ensure_loaded(self, board: AttendanceBoard) -> None:
        if not board.loaded:
            board.refresh()

    def _start(self, operator_key: str, view: DerivedAttendanceView, method: EntryMethod) -> Tuple[PendingAction, List[GuardianOption]]:
        with self._lock:
            if identity_key(view.person) in self._in_flight:
                raise CommitInFlight(f"{view.person.display_name} is already being marked")

        wf = self.workflow(operator_key)
        if wf.state == WorkflowState.GUARDIAN_PENDING:
            logger.info("Replacing unfinished selection for operator %s", operator_key)
            wf.cancel()
        elif wf.state == WorkflowState.COMMITTING:
            raise CommitInFlight("A previous commit is still in progress")

        pending = wf.select(view, method)
        return pending, wf.present_guardians()

    def select_person(self, board: AttendanceBoard, person_ref: str, *, operator_key: str) -> Tuple[PendingAction, List[GuardianOption]]:
        """Manual tap on a roster row (by numeric id or roster code)."""

        self._ensure_loaded(board)
        view = board.find_by_id(person_ref)
        if view is None:
            raise PersonNotFound(str(person_ref), len(board.views()))
        return self._start(operator_key, view, EntryMethod.MANUAL)

    def scan(self, board: AttendanceBoard, payload: str, *, operator_key: str) -> Tuple[PendingAction, List[GuardianOption]]:
        """QR scan; a miss raises PersonNotFound and leaves the scanning session open."""

        self._ensure_loaded(board)
        views = board.views()
        result = resolve_person(payload, [v.person for v in views])
        if isinstance(result, NotFound):
            logger.warning("QR scan found no match for %r among %d people", result.searched, result.roster_size)
            raise PersonNotFound(result.searched, result.roster_size)
        view = board.find(result)
        if view is None:
            raise PersonNotFound(str(payload), len(views))
        return self._start(operator_key, view, EntryMethod.QR_SCANNER)

    def choose_guardian(
        self,
        board: AttendanceBoard,
        guardian_type: GuardianType,
        *,
        operator_key: str,
        operator: Operator,
    ) -> CommitOutcome:
        wf = self.workflow(operator_key)
        pending = wf.pending
        if pending is None or wf.state != WorkflowState.GUARDIAN_PENDING:
            raise ValidationError("No attendance action is waiting for a guardian")

        key = identity_key(pending.person)
        with self._lock:
            if key in self._in_flight:
                raise CommitInFlight(f"{pending.person.display_name} is already being marked")
            self._in_flight.add(key)
        try:
            outcome = wf.choose_guardian(
                guardian_type,
                work_date=board.work_date,
                operator=operator,
                write=self._events.mark,
            )
        finally:
            with self._lock:
                self._in_flight.discard(key)

        board.apply_optimistic(outcome.view)
        return outcome

    def cancel(self, operator_key: str) -> bool:
        wf = self.workflow(operator_key)
        if wf.state != WorkflowState.GUARDIAN_PENDING:
            return False
        wf.cancel()
        return True

    def close(self) -> None:
        with self._lock:
            boards = list(self._boards.values())
            self._boards = OrderedDict()
        for board in boards:
            board.close()
