from pathlib import Path

import pandas as pd
from streamlit.testing.v1 import AppTest

import batch_audit
from batch_audit import AuditOutcome

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def test_rerun_reuses_stored_batch(monkeypatch):
    def audit_urls(*args, **kwargs):
        raise AssertionError("a rerun must not audit again")

    monkeypatch.setattr(batch_audit, "audit_urls", audit_urls)
    monkeypatch.setattr(batch_audit, "prepare_output_dir", audit_urls)

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["outcomes"] = [AuditOutcome("https://broken.example", error="boom")]
    at.session_state["summary"] = pd.DataFrame([{"URL": "https://broken.example", "Error": "boom"}])
    at.run()

    assert not at.exception
    assert at.success[0].value == "Audited 1 URLs (1 failed)"


def test_nothing_runs_without_upload(monkeypatch):
    def audit_urls(*args, **kwargs):
        raise AssertionError("no batch without an upload")

    monkeypatch.setattr(batch_audit, "audit_urls", audit_urls)

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()

    assert not at.exception
    assert not at.success
