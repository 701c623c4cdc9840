"""
Invoice field extraction from a Textract AnalyzeDocument block graph.

The extractor is a pure, single-pass transform: it takes the ``Blocks``
list returned by Textract and produces an ``ExtractedInvoiceRecord``. It
performs no I/O and keeps no state between calls, so it is safe to call
concurrently for independent documents.

Malformed or sparse content never raises; fields simply stay empty. The
only error is a caller-contract violation (see ``InvalidInputError``).
"""

from collections.abc import Mapping, Sequence
from loguru import logger

from ..core.exceptions import InvalidInputError
from ..models.invoice import (
    ExtractedInvoiceRecord,
    FieldConfidence,
    InvoiceData,
    KeyValuePair,
    TableSummary,
)
from . import field_patterns

LINE = "LINE"
WORD = "WORD"
KEY_VALUE_SET = "KEY_VALUE_SET"
TABLE = "TABLE"

CHILD = "CHILD"
VALUE = "VALUE"
KEY = "KEY"


def _confidence(block: Mapping | None) -> float:
    if not block:
        return 0.0
    try:
        return float(block.get("Confidence") or 0)
    except (TypeError, ValueError):
        return 0.0


def _text(block: Mapping) -> str:
    """Block text as a string; numbers are stringified, anything missing is empty."""
    text = block.get("Text")
    if text is None:
        return ""
    return text if isinstance(text, str) else str(text)


def _relationship_ids(block: Mapping, rel_type: str) -> list:
    """Ids of the first relationship of ``rel_type`` on ``block`` (empty if none)."""
    relationships = block.get("Relationships") or []
    if not isinstance(relationships, Sequence) or isinstance(relationships, str):
        return []
    for rel in relationships:
        if isinstance(rel, Mapping) and rel.get("Type") == rel_type:
            ids = rel.get("Ids") or []
            return list(ids) if isinstance(ids, Sequence) and not isinstance(ids, str) else []
    return []


class BlockIndex:
    """Id -> block lookup built once per document."""

    def __init__(self, blocks: list[Mapping]):
        self._by_id = {}
        for block in blocks:
            block_id = block.get("Id")
            if block_id is None:
                continue
            try:
                self._by_id[block_id] = block
            except TypeError:
                # unhashable id (list, dict); nothing can reference it
                continue

    def get(self, block_id) -> Mapping | None:
        try:
            return self._by_id.get(block_id)
        except TypeError:
            return None

    def child_text(self, block: Mapping) -> str:
        """Space-joined text of the WORD children of ``block``; dangling ids are skipped."""
        words = []
        for child_id in _relationship_ids(block, CHILD):
            child = self.get(child_id)
            if child is not None and child.get("BlockType") == WORD:
                words.append(_text(child))
        return " ".join(words)

    def value_block(self, key_block: Mapping) -> Mapping | None:
        ids = _relationship_ids(key_block, VALUE)
        if not ids:
            return None
        return self.get(ids[0])


def validate_blocks(blocks) -> list[Mapping]:
    """
    Check the caller contract: a list of mappings that all carry a BlockType.

    Raises:
        InvalidInputError: if the collection or any block is malformed
    """
    if isinstance(blocks, (str, bytes)) or not isinstance(blocks, (list, tuple)):
        raise InvalidInputError(
            f"Expected a list of OCR blocks, got {type(blocks).__name__}"
        )
    for position, block in enumerate(blocks):
        if not isinstance(block, Mapping):
            raise InvalidInputError(
                f"Block at position {position} is {type(block).__name__}, expected an object"
            )
        if not block.get("BlockType"):
            raise InvalidInputError(f"Block at position {position} has no BlockType")
    return list(blocks)


def assemble_raw_text(blocks: list[Mapping]) -> str:
    return "\n".join(_text(b) for b in blocks if b.get("BlockType") == LINE)


def overall_confidence(blocks: list[Mapping]) -> float:
    """Mean confidence of LINE blocks that report one; 0 when there are none."""
    scores = [_confidence(b) for b in blocks if b.get("BlockType") == LINE]
    scores = [s for s in scores if s > 0]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def extract_key_value_pairs(blocks: list[Mapping], index: BlockIndex) -> dict[str, KeyValuePair]:
    pairs: dict[str, KeyValuePair] = {}
    for block in blocks:
        if block.get("BlockType") != KEY_VALUE_SET:
            continue
        entity_types = block.get("EntityTypes")
        if not isinstance(entity_types, (list, tuple)) or KEY not in entity_types:
            continue

        key_text = index.child_text(block)
        value_block = index.value_block(block)
        if value_block is None or not key_text:
            continue

        # Later keys overwrite earlier ones with the same normalized text.
        pairs[key_text.lower().strip()] = KeyValuePair(
            value=index.child_text(value_block),
            confidence=min(_confidence(block), _confidence(value_block)),
        )
    return pairs


def summarize_tables(blocks: list[Mapping]) -> list[TableSummary]:
    tables = [b for b in blocks if b.get("BlockType") == TABLE]
    return [
        TableSummary(
            table_index=i,
            cell_count=len(_relationship_ids(table, CHILD)),
            confidence=_confidence(table),
        )
        for i, table in enumerate(tables)
    ]


def extract_invoice_data(raw_text: str) -> tuple[InvoiceData, dict[str, float]]:
    """
    Apply the field pattern rules to the flattened text.

    Returns:
        (invoice data, per-field heuristic confidence for matched fields)
    """
    scores = {}

    invoice_number = field_patterns.match_invoice_number(raw_text)
    if invoice_number:
        scores["invoice_number"] = field_patterns.INVOICE_NUMBER_CONFIDENCE

    total_amount = None
    currency = field_patterns.DEFAULT_CURRENCY
    amount = field_patterns.match_total_amount(raw_text)
    if amount:
        total_amount = amount.amount
        if amount.currency:
            currency = amount.currency
        scores["total_amount"] = field_patterns.TOTAL_AMOUNT_CONFIDENCE

    invoice_date, due_date = field_patterns.match_dates(raw_text)

    vendor_name = field_patterns.match_vendor_name(raw_text)
    if vendor_name:
        scores["vendor_name"] = field_patterns.VENDOR_NAME_CONFIDENCE

    data = InvoiceData(
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        due_date=due_date,
        total_amount=total_amount,
        currency=currency,
        vendor_name=vendor_name,
    )
    return data, scores


def extract_invoice(blocks) -> ExtractedInvoiceRecord:
    """
    Build an extracted invoice record from a Textract block collection.

    Args:
        blocks: The ``Blocks`` list of a Textract AnalyzeDocument response

    Returns:
        ExtractedInvoiceRecord (immutable)

    Raises:
        InvalidInputError: if ``blocks`` is not a list of typed blocks
    """
    blocks = validate_blocks(blocks)
    index = BlockIndex(blocks)

    raw_text = assemble_raw_text(blocks)
    key_value_pairs = extract_key_value_pairs(blocks, index)
    tables = summarize_tables(blocks)
    invoice_data, scores = extract_invoice_data(raw_text)

    record = ExtractedInvoiceRecord(
        raw_text=raw_text,
        key_value_pairs=key_value_pairs,
        tables=tables,
        invoice_data=invoice_data,
        confidence=FieldConfidence(overall=overall_confidence(blocks), **scores),
    )

    logger.info(
        "Text extraction completed",
        text_length=len(raw_text),
        key_value_pairs=len(key_value_pairs),
        tables_count=len(tables),
        overall_confidence=record.confidence.overall,
        invoice_number=invoice_data.invoice_number,
    )
    return record
