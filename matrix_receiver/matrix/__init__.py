from matrix_receiver.matrix.client import MatrixClient

__all__ = ["MatrixClient"]
