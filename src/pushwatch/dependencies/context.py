"""Request context dependency for FastAPI.

Handlers get the action manager, a factory for dispatchers, and a request
logger that they rebind with the action, repository URI, or GitHub delivery
they are working on. Dispatchers created afterwards log with that context.
Operator routes require an authenticated user, while the routes git servers
and GitHub call use the anonymous variant.
"""

from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Request
from safir.dependencies.gafaelfawr import auth_logger_dependency
from safir.dependencies.logger import logger_dependency
from structlog.stdlib import BoundLogger

from ..factory import Factory, ProcessContext
from ..services.manager import ActionManager

__all__ = [
    "ContextDependency",
    "RequestContext",
    "anonymous_context_dependency",
    "context_dependency",
]


@dataclass(slots=True)
class RequestContext:
    """Holds the incoming request and its surrounding context."""

    request: Request
    """Incoming request."""

    logger: BoundLogger
    """Request logger, rebound with discovered context."""

    manager: ActionManager
    """Global singleton action manager."""

    factory: Factory
    """Component factory."""

    def rebind_logger(self, **values: Any) -> None:
        """Add the given values to the logging context.

        Parameters
        ----------
        **values
            Additional values that should be added to the logging context.
        """
        self.logger = self.logger.bind(**values)
        self.factory.set_logger(self.logger)


class ContextDependency:
    """Provide a per-request context as a FastAPI dependency.

    Each request gets a `RequestContext`.  To save overhead, the portions of
    the context that are shared by all requests are collected into the single
    process-global `~pushwatch.factory.ProcessContext` and reused with each
    request.
    """

    def __init__(self) -> None:
        self._process_context: ProcessContext | None = None

    async def __call__(
        self,
        request: Request,
        logger: Annotated[BoundLogger, Depends(auth_logger_dependency)],
    ) -> RequestContext:
        """Create a per-request context."""
        return RequestContext(
            request=request,
            logger=logger,
            manager=self.process_context.manager,
            factory=Factory(self.process_context, logger),
        )

    @property
    def process_context(self) -> ProcessContext:
        if not self._process_context:
            raise RuntimeError("ContextDependency not initialized")
        return self._process_context

    async def initialize(self) -> None:
        """Initialize the process-wide shared context."""
        if self._process_context:
            self._process_context.close()
        self._process_context = ProcessContext()

    async def aclose(self) -> None:
        """Clean up the per-process configuration."""
        if self._process_context:
            self._process_context.close()
        self._process_context = None


context_dependency = ContextDependency()
"""The dependency that will return the per-request context."""


async def anonymous_context_dependency(
    request: Request,
    logger: Annotated[BoundLogger, Depends(logger_dependency)],
) -> RequestContext:
    """Per-request context for requests from unauthenticated notifiers."""
    return await context_dependency(request=request, logger=logger)
