import json

import pytest

import main


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)


def test_text_input_writes_json(tmp_path, contract_text):
    output = tmp_path / "result.json"

    exit_code = main.main(["--text-input", "--no-ai", contract_text, "-o", str(output)])

    assert exit_code == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["document"] == "text_1"
    assert payload["fields"]["contractNumber"] == "PO1234567"
    assert payload["metadata"]["enrichment"]["status"] == "not_needed"


def test_company_flag_and_csv_export(tmp_path, capsys, contract_text):
    csv_path = tmp_path / "out.csv"

    exit_code = main.main(["--text-input", "--no-ai", "--company", "Globex", contract_text, "--csv", str(csv_path)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out.split("CSV export written to")[0])
    assert payload["fields"]["clientName"] == "Globex"
    assert csv_path.exists()


def test_failed_inputs_exit_with_error(tmp_path, capsys, contract_text):
    good = tmp_path / "good.txt"
    good.write_text(contract_text, encoding="utf-8")
    output = tmp_path / "result.json"

    exit_code = main.main(["--no-ai", str(good), str(tmp_path / "missing.pdf"), "-o", str(output)])

    assert exit_code == 1
    assert "ERROR:" in capsys.readouterr().err
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [item["document"] for item in payload] == ["good.txt"]
