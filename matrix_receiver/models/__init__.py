from matrix_receiver.models.alert import Alert, AlertBatch
from matrix_receiver.models.message import RenderedMessage

__all__ = ["Alert", "AlertBatch", "RenderedMessage"]
