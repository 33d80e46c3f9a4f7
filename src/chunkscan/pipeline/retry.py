"""Dispatch with bounded retries and continue-on-error handling."""

import logging
from concurrent.futures import FIRST_COMPLETED, Future, wait
from dataclasses import dataclass, field
from typing import Iterable, Optional

from chunkscan.errors import ErrorKind
from chunkscan.models import ChunkDescriptor, ChunkResult, ErrorPolicy
from chunkscan.pipeline.job import CancellationToken
from chunkscan.pipeline.pool import WorkerPool

logger = logging.getLogger(__name__)

# How often to look at an external cancellation token while waiting
CANCEL_POLL_SECONDS = 0.1


@dataclass(frozen=True)
class RetryEvent:
    """A failed attempt that is about to be resubmitted."""

    chunk_index: int
    attempt: int
    error_kind: Optional[ErrorKind]
    error: Optional[str]

    def __str__(self) -> str:
        kind = self.error_kind.value if self.error_kind else "unknown"
        return (
            f"Chunk {self.chunk_index} attempt {self.attempt} failed ({kind}): "
            f"{self.error}; retrying"
        )


@dataclass
class DispatchOutcome:
    results: list[ChunkResult] = field(default_factory=list)
    aborted: bool = False
    skipped: list[int] = field(default_factory=list)
    events: list[RetryEvent] = field(default_factory=list)


class RetryCoordinator:
    """Submit chunk jobs, retry failures, and stop early when told to.

    A failed attempt is resubmitted while its attempt count is at most
    ``max_retries``, so ``max_retries=2`` allows three attempts in total.
    Cancelled attempts are never retried. With ``continue_on_error`` off, the
    first final failure aborts dispatch: queued jobs are cancelled, running
    ones are awaited and kept.
    """

    def __init__(self, policy: ErrorPolicy):
        self.policy = policy

    def _should_retry(self, result: ChunkResult) -> bool:
        return (
            not result.success
            and result.error_kind is not ErrorKind.CANCELLED
            and result.attempts <= self.policy.max_retries
        )

    def run(
        self,
        pool: WorkerPool,
        descriptors: Iterable[ChunkDescriptor],
        cancel_token: Optional[CancellationToken] = None,
    ) -> DispatchOutcome:
        """Dispatch every descriptor and gather one retained result per chunk.

        Args:
            pool: Pool to submit to
            descriptors: Chunks to analyze
            cancel_token: Optional caller-side token; when set, the pool is
                cancelled and dispatch ends as aborted

        Returns:
            DispatchOutcome with results in completion order
        """
        outcome = DispatchOutcome()
        attempts: dict[int, int] = {}
        in_flight: dict[Future, ChunkDescriptor] = {}

        for descriptor in descriptors:
            attempts[descriptor.index] = 1
            in_flight[pool.submit(descriptor)] = descriptor

        timeout = CANCEL_POLL_SECONDS if cancel_token is not None else None
        while in_flight:
            done, _ = wait(list(in_flight), timeout=timeout, return_when=FIRST_COMPLETED)

            if cancel_token is not None and cancel_token.cancelled and not outcome.aborted:
                logger.info("Cancellation requested, stopping dispatch")
                outcome.aborted = True
                pool.cancel()

            for future in done:
                descriptor = in_flight.pop(future)
                if future.cancelled():
                    outcome.skipped.append(descriptor.index)
                    continue

                result = pool.collect(future, descriptor)
                result.attempts = attempts[descriptor.index]

                if not outcome.aborted and self._should_retry(result):
                    self._record_retry(outcome, result)
                    attempts[descriptor.index] += 1
                    in_flight[pool.submit(descriptor)] = descriptor
                    continue

                outcome.results.append(result)
                if not result.success and not self.policy.continue_on_error and not outcome.aborted:
                    logger.warning(
                        f"Chunk {descriptor.index} failed after {result.attempts} attempts, "
                        f"aborting remaining chunks"
                    )
                    outcome.aborted = True
                    pool.cancel_pending()

        outcome.skipped.sort()
        return outcome

    def _record_retry(self, outcome: DispatchOutcome, result: ChunkResult) -> None:
        event = RetryEvent(
            chunk_index=result.chunk_index,
            attempt=result.attempts,
            error_kind=result.error_kind,
            error=result.error,
        )
        if self.policy.log_warnings:
            logger.warning(str(event))
            outcome.events.append(event)
        else:
            logger.debug(str(event))
