'''Settle-all application of attendance changes to the remote store'''
import asyncio
from enum import Enum
from typing import Final, NamedTuple, Optional, Sequence, Union

from client.errors import PartialBatchFailure
from client.logging import Logger, make_log
from client.message_strings import attendance_messages

from models.activity_log import LogAuthor, LogType, Severity
from models.records import ChangeEntry
from models.response_models import ResponseEnvelope
from models.typing import PhaseCallable, UpdateCallable

__all__ = ('Outcome',
           'UpdateOutcome',
           'AggregatedResult',
           'classify_outcome',
           'reconcile',
           'run_phase',
           'reconcile_phases')

class Outcome(Enum):
    APPLIED     = 'applied'
    REJECTED    = 'rejected'
    UNKNOWN     = 'unknown'

class UpdateOutcome(NamedTuple):
    '''Classified result of one remote call. `entry` is `None` for single-record phases'''
    entry: Optional[ChangeEntry]
    outcome: Outcome
    message: Optional[str] = None

class AggregatedResult:
    '''Combined outcome of all phases of a submit. Applied changes stay applied even when messages are present'''
    __slots__ = ('_applied_count', '_rejected_messages', '_outcomes')

    def __init__(self, outcomes: Sequence[UpdateOutcome] = ()):
        self._outcomes: Final[tuple[UpdateOutcome, ...]] = tuple(outcomes)
        self._applied_count: Final[int] = sum(1 for outcome in self._outcomes
                                              if outcome.outcome is Outcome.APPLIED and outcome.entry is not None)
        self._rejected_messages: Final[tuple[str, ...]] = tuple(outcome.message or '' for outcome in self._outcomes
                                                                if outcome.outcome is not Outcome.APPLIED)

    @property
    def applied_count(self) -> int:
        return self._applied_count
    @property
    def rejected_messages(self) -> list[str]:
        return list(self._rejected_messages)
    @property
    def outcomes(self) -> tuple[UpdateOutcome, ...]:
        return self._outcomes
    @property
    def succeeded(self) -> bool:
        return not self._rejected_messages

    def failed_entries(self) -> tuple[ChangeEntry, ...]:
        return tuple(outcome.entry for outcome in self._outcomes
                     if outcome.outcome is not Outcome.APPLIED and outcome.entry is not None)

    def merge(self, other: 'AggregatedResult') -> 'AggregatedResult':
        return AggregatedResult(self._outcomes + other._outcomes)

    def error_message(self, separator: str = '; ') -> str:
        return attendance_messages.join_messages(self._rejected_messages, separator)

    def raise_for_failures(self) -> None:
        if not self.succeeded:
            raise PartialBatchFailure(self._applied_count, self._rejected_messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregatedResult):
            return NotImplemented
        return self._outcomes == other._outcomes

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}(applied_count={self._applied_count}, rejected_messages={list(self._rejected_messages)})>'

def classify_outcome(result: Union[ResponseEnvelope, BaseException, None], unknown_message: str) -> tuple[Outcome, Optional[str]]:
    '''Sort a settled call into applied, rejected with a backend message, or failed without one'''
    if isinstance(result, ResponseEnvelope):
        if result.succeeded:
            return Outcome.APPLIED, None
        if (message := result.rejection_message):
            return Outcome.REJECTED, message
    return Outcome.UNKNOWN, unknown_message

async def _invoke(update_fn: UpdateCallable, entry: ChangeEntry) -> ResponseEnvelope:
    return await update_fn(entry)

async def _log_outcomes(logger: Logger, outcomes: Sequence[UpdateOutcome]) -> None:
    for outcome in outcomes:
        if outcome.outcome is Outcome.APPLIED:
            continue
        await logger.enqueue_log(make_log(LogAuthor.RECONCILER, LogType.ATTENDANCE,
                                          attendance_messages.failed_attendance_update(outcome.entry, outcome.message or ''),
                                          severity=Severity.ERROR if outcome.outcome is Outcome.UNKNOWN else Severity.NON_CRITICAL_FAILURE,
                                          user_concerned=outcome.entry.user_email if outcome.entry else None))

async def reconcile(changes: Sequence[ChangeEntry], update_fn: UpdateCallable,
                    unknown_message: str = attendance_messages.UNKNOWN_UPDATE_FAILURE,
                    logger: Optional[Logger] = None) -> AggregatedResult:
    '''Apply every change through its own concurrent call of `update_fn` and wait for all of them to settle.

    Individual failures never raise, they are classified and collected into the
    returned `AggregatedResult`, correlated to their entries by position. If the
    awaiting caller is cancelled, calls already dispatched keep running and
    their results are discarded.
    '''
    if not changes:
        return AggregatedResult()

    tasks: list[asyncio.Task[ResponseEnvelope]] = [asyncio.ensure_future(_invoke(update_fn, entry)) for entry in changes]
    settled: list[Union[ResponseEnvelope, BaseException]] = await asyncio.shield(asyncio.gather(*tasks, return_exceptions=True))

    outcomes: list[UpdateOutcome] = []
    for entry, result in zip(changes, settled):
        outcome, message = classify_outcome(result, unknown_message)
        outcomes.append(UpdateOutcome(entry, outcome, message))

    aggregated = AggregatedResult(outcomes)
    if logger:
        session_ids: set[int] = {entry.session_id for entry in changes}
        session_id: Optional[int] = next(iter(session_ids)) if len(session_ids) == 1 else None
        await _log_outcomes(logger, outcomes)
        await logger.enqueue_log(make_log(LogAuthor.RECONCILER, LogType.ATTENDANCE,
                                          attendance_messages.reconciled_batch(session_id, aggregated.applied_count, len(aggregated.rejected_messages)),
                                          severity=Severity.INFO if aggregated.succeeded else Severity.NON_CRITICAL_FAILURE))
    return aggregated

async def run_phase(phase: PhaseCallable, unknown_message: str) -> UpdateOutcome:
    '''Run a single-record phase, classifying any failure instead of raising it'''
    try:
        result: Union[ResponseEnvelope, BaseException] = await phase()
    except Exception as exc:
        result = exc
    outcome, message = classify_outcome(result, unknown_message)
    return UpdateOutcome(None, outcome, message)

async def reconcile_phases(prior_phase: Optional[PhaseCallable],
                           changes: Sequence[ChangeEntry], update_fn: UpdateCallable,
                           prior_unknown_message: str = attendance_messages.UNKNOWN_SESSION_UPDATE_FAILURE,
                           unknown_message: str = attendance_messages.UNKNOWN_UPDATE_FAILURE,
                           logger: Optional[Logger] = None) -> AggregatedResult:
    '''Run the prior single-record phase, then the attendance batch regardless of how the first phase went.

    The returned result lists the prior phase's failure first, followed by the
    failures of the batch.
    '''
    prior_result = AggregatedResult()
    if prior_phase is not None:
        prior_outcome: UpdateOutcome = await run_phase(prior_phase, prior_unknown_message)
        prior_result = AggregatedResult((prior_outcome,))
        if logger and prior_outcome.outcome is not Outcome.APPLIED:
            await _log_outcomes(logger, (prior_outcome,))

    batch_result: AggregatedResult = await reconcile(changes, update_fn, unknown_message, logger)
    return prior_result.merge(batch_result)
