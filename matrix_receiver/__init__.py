"""Matrix Alertmanager receiver - forwards alert webhooks into a Matrix room."""

__version__ = "0.4.0"
