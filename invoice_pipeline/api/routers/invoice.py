import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from ..deps import ExtractRequest, ProcessRequest, get_pipeline, get_store
from ...core.config import settings
from ...core.exceptions import InvalidInputError
from ...models.invoice import ExtractedInvoiceRecord, RecordResult
from ...services.invoice_extractor import extract_invoice
from ...services.pipeline import InvoicePipeline
from ...services.storage import InvoiceStoreBase

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/extract", response_model=ExtractedInvoiceRecord)
def extract(req: ExtractRequest):
    """
    Extract invoice fields from an existing Textract AnalyzeDocument response.

    Example request:
    {
        "Blocks": [
            {"Id": "1", "BlockType": "LINE", "Text": "ACME Corp", "Confidence": 99.1},
            {"Id": "2", "BlockType": "LINE", "Text": "Invoice #: INV-2024-001", "Confidence": 98.7}
        ]
    }
    """
    try:
        return extract_invoice(req.blocks)
    except InvalidInputError as e:
        logger.warning(f"Rejected block collection: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/process", response_model=RecordResult, response_model_exclude_none=True)
def process(req: ProcessRequest, pipeline: InvoicePipeline = Depends(get_pipeline)):
    """Run the full pipeline on a document that is already in S3."""
    return pipeline.process_document(req.bucket, req.key)


@router.post("/upload", response_model=RecordResult, response_model_exclude_none=True)
async def upload(
    request: Request,
    file: UploadFile = File(None),
    filename: str = "upload.pdf",
    pipeline: InvoicePipeline = Depends(get_pipeline),
):
    """
    Upload an invoice to the raw bucket and process it.

    Accepts either multipart/form-data or a raw binary body (with the
    ``filename`` query parameter naming the file).
    """
    if not settings.raw_invoice_bucket:
        raise HTTPException(status_code=503, detail="RAW_INVOICE_BUCKET not configured")

    if file:
        content = await file.read()
        filename = file.filename or filename
        content_type = file.content_type or "application/octet-stream"
    else:
        content = await request.body()
        content_type = request.headers.get("content-type", "application/octet-stream")
    if not content:
        raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")

    key = f"uploads/{uuid.uuid4()}-{filename}"
    try:
        await run_in_threadpool(pipeline.source.upload, settings.raw_invoice_bucket, key, content, content_type)
    except Exception as e:
        logger.error(f"Upload failed: {e}")
        raise HTTPException(status_code=502, detail=f"Upload failed: {e}")

    return await run_in_threadpool(pipeline.process_document, settings.raw_invoice_bucket, key)


@router.get("")
def list_invoices(store: InvoiceStoreBase = Depends(get_store)):
    """List stored invoices (for debugging)"""
    invoices = store.list_all()
    return {"total": len(invoices), "invoices": invoices}


@router.get("/{invoice_id}")
def get_invoice(invoice_id: str, store: InvoiceStoreBase = Depends(get_store)):
    invoice = store.get(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice
