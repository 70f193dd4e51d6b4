"""
End-to-end tests for parcel file intake.

Tests the complete flow: CSV file → review session → fixes → confirmed batch,
and the same flow driven through the command-line interface.
"""

import json

import pytest

from parcel_intake.batch import BatchBlockedError, ReviewSession
from parcel_intake.batch.writers import build_template
from parcel_intake.cli.intake_cli import main
from parcel_intake.core.models import ParcelStatus
from parcel_intake.observability import metrics


@pytest.mark.e2e
def test_dirty_csv_review_to_batch(dirty_csv_path):
    """
    Fix a dirty merchant export until it can be confirmed.

    Steps:
    1. Load the semicolon file; duplicates and errors block confirmation
    2. Remove one duplicate and fix the bad phone, name and weight
    3. Confirm and check the batch snapshot and callback
    """
    batches = []
    session = ReviewSession(on_batch_complete=batches.append)
    report = session.load_file(dirty_csv_path)

    assert report.status_counts == {"VALID": 1, "WARNING": 2, "ERROR": 3, "PENDING": 0}
    with pytest.raises(BatchBlockedError) as exc_info:
        session.confirm()
    assert exc_info.value.reasons == ["duplicate invoice ids: INV-2", "3 parcel(s) with errors"]

    parcels = {p.invoice_id: p for p in reversed(session.parcels)}
    session.remove_parcel(parcels["INV-2"].id)
    session.update_parcel(parcels["INV-4"].id, phone="01712345679")
    session.update_parcel(parcels["INV-5"].id, recipient_name="Nasrin Begum")
    session.update_parcel(parcels["INV-7"].id, weight="0,75")

    assert all(p.status == ParcelStatus.VALID for p in session.parcels)
    batch = session.confirm()

    assert batches == [batch]
    assert batch.total_parcels == 5
    assert batch.valid_parcels == 5
    assert batch.error_parcels == 0
    assert [p.invoice_id for p in batch.parcels] == ["INV-1", "INV-2", "INV-4", "INV-5", "INV-7"]


@pytest.mark.e2e
def test_duplicate_upload_blocks_until_resolved(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text(
        "Invoice,Name,Phone,Address,Weight\n"
        "A,Rahim,01712345678,Dhaka,1\n"
        "A,Karim,01812345678,Chittagong,2\n",
        encoding="utf-8",
    )
    session = ReviewSession()
    session.load_file(path)

    assert [p.status for p in session.parcels] == [ParcelStatus.WARNING, ParcelStatus.WARNING]
    assert session.can_confirm is False

    session.remove_parcel(session.parcels[0].id)
    [remaining] = session.parcels
    assert remaining.status == ParcelStatus.VALID
    assert session.confirm().total_parcels == 1


@pytest.mark.e2e
def test_metrics_collected(template_csv):
    session = ReviewSession()
    session.load_text(template_csv)
    session.confirm()

    exposition = metrics.generate_metrics().decode("utf-8")
    assert 'intake_files_ingested_total{status="success"}' in exposition
    assert 'intake_batches_confirmed_total{status="confirmed"}' in exposition
    assert 'intake_parcels_by_status{status="VALID"} 3.0' in exposition


@pytest.mark.e2e
def test_cli_check_reports_blocked_file(dirty_csv_path, capsys):
    exit_code = main(["check", "--input", str(dirty_csv_path)])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "Delimiter: ';'" in out
    assert "INV-4: ERROR - Invalid Operator/Length" in out
    assert "Blocked: duplicate invoice ids: INV-2; 3 parcel(s) with errors" in out


@pytest.mark.e2e
def test_cli_check_rejects_empty_file(tmp_path, capsys):
    path = tmp_path / "empty.csv"
    path.write_text("Invoice ID\n", encoding="utf-8")

    assert main(["check", "--input", str(path)]) == 1
    assert "No valid data found" in capsys.readouterr().err


@pytest.mark.e2e
def test_cli_template_then_check(tmp_path, capsys):
    template_path = tmp_path / "template.csv"

    assert main(["template", "--output", str(template_path)]) == 0
    assert template_path.read_text(encoding="utf-8") == build_template()

    # Second sample row has no invoice id
    assert main(["check", "--input", str(template_path)]) == 1
    out = capsys.readouterr().out
    assert "mapping confidence: 1.00" in out
    assert "#2 <no invoice>: ERROR - Missing Required Fields" in out


@pytest.mark.e2e
def test_cli_submit_with_ai_fallback(template_csv, tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    input_path = tmp_path / "orders.csv"
    input_path.write_text(template_csv, encoding="utf-8")
    batch_path = tmp_path / "out" / "batch.json"

    exit_code = main(["submit", "--input", str(input_path), "--output", str(batch_path), "--ai"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "AI review: Could not complete AI analysis at this time." in out
    data = json.loads(batch_path.read_text(encoding="utf-8"))
    assert data["total_parcels"] == 3
    assert data["valid_parcels"] == 3


@pytest.mark.e2e
def test_cli_submit_blocked(dirty_csv_path, tmp_path, capsys):
    batch_path = tmp_path / "batch.json"

    assert main(["submit", "--input", str(dirty_csv_path), "--output", str(batch_path)]) == 1
    assert "Batch cannot be confirmed" in capsys.readouterr().err
    assert not batch_path.exists()


@pytest.mark.e2e
def test_cli_without_command_prints_help(capsys):
    assert main([]) == 1
    assert "parcel-intake" in capsys.readouterr().out


@pytest.mark.e2e
def test_cli_metrics_port_starts_server(template_csv, tmp_path, monkeypatch):
    started = []
    monkeypatch.setattr(
        "prometheus_client.start_http_server",
        lambda port, registry=None: started.append((port, registry)),
    )
    input_path = tmp_path / "orders.csv"
    input_path.write_text(template_csv, encoding="utf-8")

    assert main(["--metrics-port", "9123", "check", "--input", str(input_path)]) == 0
    assert started == [(9123, metrics.REGISTRY)]


@pytest.mark.e2e
def test_metrics_server_port_from_environment(monkeypatch):
    started = []
    monkeypatch.setattr(
        "prometheus_client.start_http_server",
        lambda port, registry=None: started.append(port),
    )
    monkeypatch.setenv("METRICS_PORT", "9200")

    metrics.start_metrics_server()
    assert started == [9200]
