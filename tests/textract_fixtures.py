"""
Builders for Textract AnalyzeDocument blocks used across the test suite.
"""


def line(block_id, text, confidence=99.0):
    return {"Id": block_id, "BlockType": "LINE", "Text": text, "Confidence": confidence}


def word(block_id, text, confidence=99.0):
    return {"Id": block_id, "BlockType": "WORD", "Text": text, "Confidence": confidence}


def key_block(block_id, word_ids, value_id=None, confidence=90.0):
    relationships = []
    if value_id is not None:
        relationships.append({"Type": "VALUE", "Ids": [value_id]})
    if word_ids:
        relationships.append({"Type": "CHILD", "Ids": list(word_ids)})
    block = {
        "Id": block_id,
        "BlockType": "KEY_VALUE_SET",
        "EntityTypes": ["KEY"],
        "Relationships": relationships,
    }
    if confidence is not None:
        block["Confidence"] = confidence
    return block


def value_block(block_id, word_ids, confidence=90.0):
    block = {
        "Id": block_id,
        "BlockType": "KEY_VALUE_SET",
        "EntityTypes": ["VALUE"],
        "Relationships": [{"Type": "CHILD", "Ids": list(word_ids)}],
    }
    if confidence is not None:
        block["Confidence"] = confidence
    return block


def table(block_id, cell_ids=None, confidence=95.0):
    block = {"Id": block_id, "BlockType": "TABLE", "Confidence": confidence}
    if cell_ids is not None:
        block["Relationships"] = [{"Type": "CHILD", "Ids": list(cell_ids)}]
    return block


def lines(*texts, confidence=99.0):
    return [line(f"line-{i}", text, confidence) for i, text in enumerate(texts)]


def sample_invoice_blocks():
    """A small but complete invoice: header lines, one form field and one table."""
    return [
        line("l1", "ACME Corp", 99.0),
        line("l2", "Invoice #: INV-2024-001", 97.0),
        line("l3", "Date: 01/15/2024", 98.0),
        line("l4", "Due: 02/14/2024", 96.0),
        line("l5", "Total: $1,500.00", 95.0),
        word("w1", "PO"),
        word("w2", "Number:"),
        word("w3", "PO-7781"),
        key_block("k1", ["w1", "w2"], value_id="v1", confidence=92.0),
        value_block("v1", ["w3"], confidence=88.0),
        table("t1", [f"c{i}" for i in range(6)], confidence=93.5),
    ]
