"""
Concurrency Coordinator Module

This module is responsible for:
1. Running one worker per chunk on a bounded set of concurrent contexts
2. Collecting the per-chunk results into one unordered list
3. Failing the whole run if any chunk fails

Two interchangeable executors are provided:
- ChannelPoolExecutor: thread pool whose workers push finished chunk batches
  onto a shared queue that the coordinator drains
- ForkJoinExecutor: one task per chunk (threads or processes), joined at the end

Workers never share a decoder. Each call of the worker opens its own, so the
only shared mutable state is the result queue.
"""

import logging
import os
import queue
import threading
from abc import ABC, abstractmethod
from concurrent.futures import (
    FIRST_EXCEPTION,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from typing import Callable, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .errors import ConfigError
from .models import Chunk, SampledColor


logger = logging.getLogger(__name__)

EXECUTOR_NAMES = ('pool', 'fork-join')

ChunkFn = Callable[[Chunk], List[SampledColor]]


def default_worker_count() -> int:
    """Available parallelism minus one context reserved for coordination"""
    return max(1, (os.cpu_count() or 1) - 1)


def _check_worker_count(max_workers: int):
    if max_workers < 1:
        raise ConfigError(f"Worker count must be at least 1, got {max_workers}")


class ChunkExecutor(ABC):
    """Runs a worker over a set of chunks and gathers every result"""

    def __init__(self, max_workers: Optional[int] = None, show_progress: bool = False):
        """
        Args:
            max_workers: Concurrency bound (default: available parallelism - 1)
            show_progress: Display a tqdm progress bar over completed chunks
        """
        self.max_workers = default_worker_count() if max_workers is None else max_workers
        _check_worker_count(self.max_workers)
        self.show_progress = show_progress

    @abstractmethod
    def execute(self, chunks: Sequence[Chunk], worker: ChunkFn) -> List[SampledColor]:
        """
        Run ``worker`` once per chunk.

        Args:
            chunks: Chunks to process
            worker: Callable processing one chunk with its own decoder

        Returns:
            All SampledColor values, in no particular order

        Raises:
            The first worker failure; no results are returned in that case
        """

    def _progress(self, total: int) -> tqdm:
        return tqdm(
            total=total,
            desc="Extracting colors",
            unit="chunk",
            disable=not self.show_progress
        )


class ChannelPoolExecutor(ChunkExecutor):
    """
    Bounded thread pool feeding a multi-producer/single-consumer queue.

    Each worker sends exactly one message: its whole chunk batch once the
    chunk is done, or the error that stopped it. A failed chunk therefore
    never contributes partial results.
    """

    def execute(self, chunks: Sequence[Chunk], worker: ChunkFn) -> List[SampledColor]:
        if not chunks:
            return []

        channel: "queue.Queue[Tuple[Chunk, Optional[List[SampledColor]], Optional[BaseException]]]" = queue.Queue()

        guarded = _abort_on_failure(worker)

        # Every started producer must post exactly one message, whatever it raised,
        # or the consumer below would wait forever
        def produce(chunk: Chunk):
            try:
                batch = guarded(chunk)
            except BaseException as e:
                channel.put((chunk, None, e))
            else:
                channel.put((chunk, batch, None))

        workers = min(self.max_workers, len(chunks))
        logger.debug(f"Dispatching {len(chunks)} chunk(s) to a pool of {workers} thread(s)")

        results: List[SampledColor] = []
        # Leaving the pool context joins every thread, so nothing outlives this call
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chunk") as pool:
            futures = [pool.submit(produce, chunk) for chunk in chunks]

            with self._progress(len(chunks)) as progress:
                for _ in range(len(chunks)):
                    chunk, batch, error = channel.get()
                    if error is not None:
                        for future in futures:
                            future.cancel()
                        logger.error(f"Chunk {chunk} failed, aborting extraction: {error}")
                        raise error

                    logger.debug(f"Collected {len(batch)} color(s) from chunk {chunk}")
                    results.extend(batch)
                    progress.update(1)

        return results


class ForkJoinExecutor(ChunkExecutor):
    """
    Submit one task per chunk and join the per-chunk lists.

    With ``processes=True`` the chunks run in separate processes, so the worker
    and everything it holds must be picklable.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        show_progress: bool = False,
        processes: bool = False
    ):
        super().__init__(max_workers, show_progress)
        self.processes = processes

    def _make_pool(self, workers: int) -> Executor:
        if self.processes:
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chunk")

    def execute(self, chunks: Sequence[Chunk], worker: ChunkFn) -> List[SampledColor]:
        if not chunks:
            return []

        workers = min(self.max_workers, len(chunks))
        kind = "process(es)" if self.processes else "thread(s)"
        logger.debug(f"Submitting {len(chunks)} chunk(s) to {workers} {kind}")

        with self._make_pool(workers) as pool:
            task = worker if self.processes else _abort_on_failure(worker)
            futures = [pool.submit(task, chunk) for chunk in chunks]
            with self._progress(len(chunks)) as progress:
                for future in futures:
                    future.add_done_callback(lambda _: progress.update(1))
                _wait_or_cancel(futures)

        results: List[SampledColor] = []
        for future in futures:
            results.extend(future.result())
        return results


def _abort_on_failure(worker: ChunkFn) -> ChunkFn:
    """
    Wrap a worker so that once one chunk fails, chunks not yet started in
    the same thread pool return an empty batch instead of decoding.
    """
    aborted = threading.Event()

    def run(chunk: Chunk) -> List[SampledColor]:
        if aborted.is_set():
            return []
        try:
            return worker(chunk)
        except BaseException:
            aborted.set()
            raise

    return run


def _wait_or_cancel(futures: List[Future]):
    """
    Block until every future is done, or until one fails.

    On failure, futures that have not started are cancelled, running ones are
    left to finish, and the failure is re-raised.
    """
    done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

    failed = [f for f in futures if f in done and f.exception() is not None]
    if not failed:
        return

    for future in not_done:
        future.cancel()
    wait(not_done)

    error = failed[0].exception()
    logger.error(f"Chunk failed, aborting extraction: {error}")
    raise error


def get_executor(
    name: str,
    max_workers: Optional[int] = None,
    show_progress: bool = False,
    processes: bool = False
) -> ChunkExecutor:
    """
    Build an executor by name.

    Args:
        name: 'pool' (ChannelPoolExecutor) or 'fork-join' (ForkJoinExecutor)
        max_workers: Concurrency bound (default: available parallelism - 1)
        show_progress: Display a progress bar
        processes: Run chunks in worker processes (fork-join only)

    Returns:
        ChunkExecutor instance
    """
    if name == 'pool':
        if processes:
            raise ConfigError("The pool executor runs threads only; use 'fork-join' for processes")
        return ChannelPoolExecutor(max_workers, show_progress)
    if name == 'fork-join':
        return ForkJoinExecutor(max_workers, show_progress, processes=processes)
    raise ConfigError(f"Unknown executor '{name}', expected one of {', '.join(EXECUTOR_NAMES)}")
