"""
Tests for the S3-triggered Lambda entry point.
"""

import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from invoice_pipeline import lambda_handler
from textract_fixtures import sample_invoice_blocks


@pytest.fixture(autouse=True)
def wired_pipeline(pipeline, monkeypatch):
    monkeypatch.setattr(lambda_handler, "_pipeline", pipeline)
    return pipeline


@pytest.fixture
def context():
    return SimpleNamespace(aws_request_id="req-123", function_name="textract-processor")


def test_handler_processes_records(textract_client, context):
    textract_client.analyze_document.return_value = {"Blocks": sample_invoice_blocks()}
    event = {"Records": [{"s3": {"bucket": {"name": "raw"}, "object": {"key": "inv.pdf"}}}]}

    response = lambda_handler.handler(event, context)

    assert response["statusCode"] == 200
    body = json.loads(response["body"])
    assert body["results"][0]["objectKey"] == "inv.pdf"
    assert body["results"][0]["status"] == "success"
    assert body["results"][0]["extractedData"]["invoiceNumber"] == "INV-2024-001"


def test_handler_reports_per_record_errors_with_200(context):
    event = {"Records": [{"s3": {"bucket": {"name": "raw"}, "object": {"key": "notes.docx"}}}]}

    response = lambda_handler.handler(event, context)

    assert response["statusCode"] == 200
    result = json.loads(response["body"])["results"][0]
    assert result["status"] == "error"
    assert "Unsupported file format" in result["error"]


def test_handler_empty_event_returns_500_and_notifies(publisher, context):
    response = lambda_handler.handler({"Records": []}, context)

    assert response["statusCode"] == 500
    body = json.loads(response["body"])
    assert body["error"] == "No S3 records found in event"
    publisher.notify_error.assert_called_once_with("batch-processing", "No S3 records found in event")


def test_get_pipeline_reuses_instance(wired_pipeline):
    assert lambda_handler.get_pipeline() is wired_pipeline


@pytest.mark.parametrize("event", [[], ["x"], "not-an-event", {"Records": "x"}])
def test_handler_non_object_event_returns_500(event, publisher, context):
    response = lambda_handler.handler(event, context)

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["message"] == "Error processing invoices"
    publisher.notify_error.assert_called_once()


def test_handler_pipeline_construction_failure_returns_500(monkeypatch, context):
    fallback = Mock()
    monkeypatch.setattr(lambda_handler, "_pipeline", None)
    monkeypatch.setattr(lambda_handler, "InvoicePipeline", Mock(side_effect=RuntimeError("no credentials")))
    monkeypatch.setattr(lambda_handler.NotificationPublisher, "from_settings", Mock(return_value=fallback))

    response = lambda_handler.handler({"Records": []}, context)

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["error"] == "no credentials"
    fallback.notify_error.assert_called_once_with("batch-processing", "no credentials")


def test_handler_survives_failing_notification(publisher, context):
    publisher.notify_error.side_effect = RuntimeError("sns down")

    response = lambda_handler.handler({"Records": []}, context)

    assert response["statusCode"] == 500
