"""
Parser Worker Pool

Bounded pool of workers that turn source bytes into ParseResults, keeping
CPU-bound tree-sitter work off the coordinating thread.

Lifecycle: prepare() before the first request of a batch, terminate() after
the last one completes. session() does both and releases the workers on
every exit path.
"""

import multiprocessing
import os
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from astingest.ast.models import ParseFailure, ParseRequest, ParseResponse, ParseResult
from astingest.ast.parser import get_parser
from astingest.configs import get_logger
from astingest.exceptions import WorkerPoolError

logger = get_logger("ingest.workers")


def run_parse_request(request: ParseRequest) -> ParseResponse:
    """
    Parse one request inside a worker.

    Module-level so process pools can pickle it. Any exception is turned into
    a ParseFailure for this request alone.
    """
    try:
        result = get_parser().parse_source(request.path, request.content, request.language)
    except Exception as e:
        result = ParseFailure(path=request.path, language=request.language, message=f"Parser crashed: {e}")
    return ParseResponse(request_id=request.request_id, result=result)


def available_parallelism() -> int:
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return os.cpu_count() or 1


def process_start_method() -> str:
    """
    Start method for process workers: forkserver where available, else spawn.

    Never fork: the pool starts while I/O threads are alive.
    """
    methods = multiprocessing.get_all_start_methods()
    return "forkserver" if "forkserver" in methods else "spawn"


class ParserPool:
    """
    Pool of parser workers.

    Args:
        max_workers: Upper bound on workers (capped by available parallelism)
        kind: "process" (default) or "thread"
    """

    def __init__(self, max_workers: Optional[int] = None, kind: str = "process"):
        if kind not in ("process", "thread"):
            raise ValueError(f"Unknown pool kind: {kind}")
        self.kind = kind
        self.max_workers = max_workers
        self.start_method = process_start_method() if kind == "process" else None
        self.dispatch_count = 0
        self._executor: Optional[Executor] = None
        self._lock = threading.Lock()

    @property
    def prepared(self) -> bool:
        return self._executor is not None

    def worker_count(self) -> int:
        limit = available_parallelism()
        if self.max_workers:
            return max(1, min(self.max_workers, limit))
        return limit

    def prepare(self) -> None:
        """Start the workers. Calling it on a prepared pool does nothing."""
        with self._lock:
            if self._executor is not None:
                return
            workers = self.worker_count()
            if self.kind == "process":
                context = multiprocessing.get_context(self.start_method)
                self._executor = ProcessPoolExecutor(max_workers=workers, mp_context=context)
            else:
                self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="astingest-parser")
            logger.debug(f"Prepared {self.kind} parser pool with {workers} workers")

    def terminate(self) -> None:
        """Release all workers. Pending requests are cancelled."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True, cancel_futures=True)
            logger.debug("Terminated parser pool")

    @contextmanager
    def session(self) -> Iterator["ParserPool"]:
        """Hold the pool for one batch."""
        self.prepare()
        try:
            yield self
        finally:
            self.terminate()

    def submit(self, request: ParseRequest) -> "Future[ParseResponse]":
        """
        Queue one parse request.

        Raises:
            WorkerPoolError: If the pool was not prepared
        """
        with self._lock:
            if self._executor is None:
                raise WorkerPoolError(
                    "Parse requested before the parser pool was prepared",
                    {"request_id": request.request_id, "path": request.path},
                )
            self.dispatch_count += 1
            return self._executor.submit(run_parse_request, request)

    def parse_all(self, requests: Iterable[ParseRequest]) -> dict[str, ParseResult]:
        """
        Parse a batch and return results keyed by request_id.

        Completion order is irrelevant; results are matched by request id.
        A worker that dies only fails its own request.
        """
        futures = {self.submit(request): request for request in requests}
        results: dict[str, ParseResult] = {}
        for future in as_completed(futures):
            request = futures[future]
            try:
                response = future.result()
            except Exception as e:
                logger.error(f"Parser worker failed on {request.path}: {e}")
                results[request.request_id] = ParseFailure(
                    path=request.path,
                    language=request.language,
                    message=f"Parser worker failed: {e}",
                )
                continue
            results[response.request_id] = response.result
        return results
