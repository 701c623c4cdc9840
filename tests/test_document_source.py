"""
Tests for S3 event parsing and pre-analysis document validation.
"""

import pytest
from botocore.exceptions import ClientError

from invoice_pipeline.core.exceptions import (
    DocumentNotFoundError,
    FileTooLargeError,
    InvalidEventError,
    UnsupportedFormatError,
)
from invoice_pipeline.services.document_source import DocumentSource, parse_s3_event_record


def s3_record(bucket, key):
    return {"s3": {"bucket": {"name": bucket}, "object": {"key": key, "size": 1024}}}


def test_parse_record_decodes_key():
    bucket, key = parse_s3_event_record(s3_record("raw-invoices", "2024/my+invoice%281%29.pdf"))

    assert bucket == "raw-invoices"
    assert key == "2024/my invoice(1).pdf"


@pytest.mark.parametrize("record", [{}, {"s3": {"bucket": {}}}, {"s3": None}])
def test_parse_malformed_record_raises(record):
    with pytest.raises(InvalidEventError):
        parse_s3_event_record(record)


def test_validate_accepts_supported_file(s3_client):
    source = DocumentSource(s3_client=s3_client)

    assert source.validate("raw", "invoices/INV-1.PDF") == 2048
    s3_client.head_object.assert_called_once_with(Bucket="raw", Key="invoices/INV-1.PDF")


@pytest.mark.parametrize("key", ["notes.docx", "archive.zip", "no-extension"])
def test_validate_rejects_unsupported_format(s3_client, key):
    source = DocumentSource(s3_client=s3_client)

    with pytest.raises(UnsupportedFormatError):
        source.validate("raw", key)
    s3_client.head_object.assert_not_called()


def test_validate_rejects_large_file(s3_client):
    s3_client.head_object.return_value = {"ContentLength": 20 * 1024 * 1024}
    source = DocumentSource(s3_client=s3_client)

    with pytest.raises(FileTooLargeError, match="max: 10485760"):
        source.validate("raw", "big.pdf")


def test_validate_respects_configured_limit(s3_client):
    source = DocumentSource(s3_client=s3_client, max_file_size=1000)

    with pytest.raises(FileTooLargeError):
        source.validate("raw", "scan.png")


def test_validate_missing_object(s3_client):
    s3_client.head_object.side_effect = ClientError(
        {"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject"
    )
    source = DocumentSource(s3_client=s3_client)

    with pytest.raises(DocumentNotFoundError, match="inv.pdf"):
        source.validate("raw", "inv.pdf")


def test_validate_other_client_errors_propagate(s3_client):
    s3_client.head_object.side_effect = ClientError(
        {"Error": {"Code": "403", "Message": "Forbidden"}}, "HeadObject"
    )
    source = DocumentSource(s3_client=s3_client)

    with pytest.raises(ClientError):
        source.validate("raw", "inv.pdf")


def test_upload_puts_object(s3_client):
    source = DocumentSource(s3_client=s3_client)

    source.upload("raw", "uploads/inv.pdf", b"%PDF-1.4", "application/pdf")

    s3_client.put_object.assert_called_once_with(
        Bucket="raw", Key="uploads/inv.pdf", Body=b"%PDF-1.4", ContentType="application/pdf"
    )
