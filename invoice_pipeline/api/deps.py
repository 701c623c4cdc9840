from typing import Any
from pydantic import BaseModel, Field
from ..services.pipeline import InvoicePipeline
from ..services.storage import InvoiceStoreBase, get_invoice_store

class ExtractRequest(BaseModel):
    # Left untyped so malformed block lists reach the extractor and are
    # reported as InvalidInputError rather than a generic schema error.
    blocks: Any = Field(default=None, alias="Blocks")

class ProcessRequest(BaseModel):
    bucket: str
    key: str

_pipeline: InvoicePipeline | None = None

def get_pipeline() -> InvoicePipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = InvoicePipeline()
    return _pipeline

def get_store() -> InvoiceStoreBase:
    return get_invoice_store()
