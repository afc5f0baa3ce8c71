"""Parts inventory ledger with FIFO cost accounting."""

__version__ = "1.0.0"
