"""
Integration tests for the command line interface.
"""

import json

import pytest

from contract_analyzer.cli.main import build_parser, main


def test_analyze_command(contract_pdf_bytes, tmp_path, capsys):
    pdf_path = tmp_path / "msa.pdf"
    pdf_path.write_bytes(contract_pdf_bytes)

    exit_code = main(["analyze", str(pdf_path)])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert output["success"] is True
    assert output["source"] == str(pdf_path)
    assert len(output["sections"]) == 4


def test_analyze_missing_file(tmp_path, capsys):
    exit_code = main(["analyze", str(tmp_path / "missing.pdf")])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert output["message"] == "Error processing PDF contract"


def test_classify_command(capsys):
    exit_code = main(["classify", "Payment is due within 30 days of invoice. The sky is blue."])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [c["type"] for c in output["clauses"]] == ["payment"]
    assert output["counts"]["payment"] == 1


def test_batch_command(contract_pdf_bytes, blank_pdf_bytes, tmp_path, capsys):
    (tmp_path / "a.pdf").write_bytes(contract_pdf_bytes)
    (tmp_path / "b.pdf").write_bytes(blank_pdf_bytes)

    exit_code = main(["batch", str(tmp_path)])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert [item["success"] for item in output] == [True, False]
    assert output[0]["sections"] == 4
    assert output[1]["message"] == "Failed to extract text from PDF"
    assert output[1]["metadata"] is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_flags():
    args = build_parser().parse_args(["analyze", "x.pdf", "--ai", "--hierarchical"])
    assert args.ai is True
    assert args.azure is False
    assert args.hierarchical is True
