"""Background workers for the invoice lifecycle service"""
from .invoice_batch import InvoiceBatchWorker

__all__ = ["InvoiceBatchWorker"]
