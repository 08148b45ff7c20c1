"""Base class for message renderers."""

from abc import ABC, abstractmethod

from matrix_receiver.models import AlertBatch, RenderedMessage


class BaseRenderer(ABC):
    """Abstract base class for message renderers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Renderer name for logging."""
        ...

    @abstractmethod
    def render(self, batch: AlertBatch) -> list[RenderedMessage]:
        """Render an alert batch into messages, in sending order."""
        ...
