from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys so stored JSON matches existing consumers."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class KeyValuePair(CamelModel):
    value: str = ""
    confidence: float = 0.0


class TableSummary(CamelModel):
    table_index: int
    cell_count: int = 0
    confidence: float = 0.0


class InvoiceData(CamelModel):
    invoice_number: str | None = None
    invoice_date: str | None = None
    due_date: str | None = None
    total_amount: float | None = None
    currency: str = "USD"
    vendor_name: str | None = None


class FieldConfidence(CamelModel):
    overall: float = 0.0
    invoice_number: float = 0.0
    total_amount: float = 0.0
    vendor_name: float = 0.0


class ExtractedInvoiceRecord(CamelModel):
    """
    Result of one extraction call.

    Attribute assignment is rejected; the nested ``key_value_pairs`` dict is
    not frozen, but every call builds fresh containers so a caller editing
    its copy never affects another result.
    """
    raw_text: str = ""
    key_value_pairs: dict[str, KeyValuePair] = Field(default_factory=dict)
    tables: list[TableSummary] = Field(default_factory=list)
    invoice_data: InvoiceData = Field(default_factory=InvoiceData)
    confidence: FieldConfidence = Field(default_factory=FieldConfidence)


class ProcessedInvoice(CamelModel):
    """An extracted record plus where it came from; this is what gets persisted."""
    invoice_id: str
    file_name: str
    source_bucket: str
    extracted_at: str
    processing_time_ms: int = 0
    extracted_data: ExtractedInvoiceRecord


class RecordResult(CamelModel):
    object_key: str
    status: str  # "success" | "error"
    invoice_id: str | None = None
    processing_time: int | None = None  # milliseconds
    extracted_data: dict | None = None
    error: str | None = None
