import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Dict, Optional

from elktest.logs import TRACE
from elktest.state import RequestCounter
from elktest.utils import now_millis, pretty_json

logger = logging.getLogger(__name__)

SIMULATED_ERROR_MESSAGE = "Simulated error for testing ELK stack"


class SimulatedError(RuntimeError):
    pass


class GenerateLimitExceeded(ValueError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"count {count} exceeds the configured maximum of {limit}")
        self.count = count
        self.limit = limit


class RequestHandler:
    """Endpoint logic behind the HTTP routes.

    Every collaborator can be swapped out: tests pass a seeded ``rng``
    and a ``sleep`` that returns immediately.
    """

    def __init__(
        self,
        counter: Optional[RequestCounter] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], int] = now_millis,
        log: Optional[logging.Logger] = None,
        generate_logs_max: Optional[int] = None,
    ):
        self.counter = counter or RequestCounter()
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock
        self.log = log or logger
        self.generate_logs_max = generate_logs_max

    def greet(self, name: str = "World") -> Dict[str, Any]:
        current = self.counter.increment()
        self.log.info("Received hello request from: %s, request count: %d", name, current)
        return {
            "message": f"Hello, {name}!",
            "timestamp": self.clock(),
            "requestNumber": current,
        }

    async def process(self, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.counter.increment()
        self.log.info("Processing data request, request count: %d, data size: %d", current, len(data))
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug("Request payload: %s", pretty_json(data))

        processing_time = 100 + self.rng.randrange(1000)
        try:
            await self.sleep(processing_time / 1000)
        except asyncio.CancelledError:
            # No uncancel(): Task.cancelling() stays set for the caller, we only stop waiting.
            self.log.error("Processing interrupted", exc_info=True)

        self.log.info("Processing completed in %dms", processing_time)
        return {
            "status": "processed",
            "processingTimeMs": processing_time,
            "receivedData": data,
            "requestNumber": current,
        }

    def simulate_error(self, throw_exception: bool = False) -> Dict[str, Any]:
        current = self.counter.increment()
        self.log.warning("Error simulation endpoint called, throwException: %s", str(throw_exception).lower())

        if throw_exception:
            self.log.error("Simulating application error!")
            raise SimulatedError(SIMULATED_ERROR_MESSAGE)

        self.log.info("Logged warning without throwing exception")
        return {
            "message": "Warning logged successfully",
            "requestNumber": current,
        }

    def generate_logs(self, count: int = 10) -> Dict[str, Any]:
        if self.generate_logs_max is not None and count > self.generate_logs_max:
            raise GenerateLimitExceeded(count, self.generate_logs_max)

        self.log.info("Starting log generation, count: %d", count)
        for i in range(1, count + 1):
            kind = self.rng.randrange(4)
            if kind == 0:
                self.log.log(TRACE, "TRACE log entry %d of %d", i, count)
            elif kind == 1:
                self.log.debug("DEBUG log entry %d of %d: Random value = %d", i, count, self.rng.randrange(1000))
            elif kind == 2:
                self.log.info("INFO log entry %d of %d: Operation completed successfully", i, count)
            else:
                self.log.warning("WARN log entry %d of %d: Potential issue detected", i, count)
        self.log.info("Log generation completed, generated %d log entries", count)

        return {
            "status": "completed",
            "logsGenerated": count,
            "requestNumber": self.counter.increment(),
        }

    def health(self) -> Dict[str, Any]:
        return {
            "status": "UP",
            "totalRequests": self.counter.value,
            "timestamp": self.clock(),
        }
