"""
Price reconciliation: classify stored vs fetched prices and pick stale batches.
"""

from .reconciler import chunked, classify, reconcile, select_stale

__all__ = ['chunked', 'classify', 'reconcile', 'select_stale']
