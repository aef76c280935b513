"""
Batch price refresh across tenants.
"""

from .updater import ProductUpdater, UpdateSummary

__all__ = ['ProductUpdater', 'UpdateSummary']
