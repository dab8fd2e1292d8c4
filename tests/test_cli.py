import csv
import json

import batch_cli
import cli

from fixtures.bytecodes import BLACKLIST_TOKEN, MINT_AND_DELEGATECALL


def test_offline_json(tmp_path, capsys):
    code = tmp_path / "code.hex"
    code.write_text(MINT_AND_DELEGATECALL)
    info = tmp_path / "explorer.json"
    info.write_text(json.dumps({"isVerified": True}))

    assert cli.main(["--bytecode-file", str(code), "--explorer-file", str(info), "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["findings"]["dangerousFunctions"]["status"] == "FAIL"
    # verified 0, proxy 0, owner 0, dangerous 30
    assert out["riskScore"] == {"score": 70, "label": "Medium"}


def test_offline_bad_abi_file_is_ignored(tmp_path, capsys):
    abi = tmp_path / "abi.json"
    abi.write_text("{broken")
    assert cli.main(["--abi-file", str(abi)]) == 0
    captured = capsys.readouterr()
    assert "treating ABI as unavailable" in captured.err
    assert "Final Score" in captured.out


def test_live_error_exit_code(monkeypatch, capsys):
    def boom(*a, **kw):
        raise cli.AnalyzerError("Unsupported chain", 400)

    monkeypatch.setattr(cli, "analyze_contract", boom)
    assert cli.main(["--chain", "solana", "--address", "0x" + "1" * 40]) == 1
    assert "Unsupported chain" in capsys.readouterr().err


def test_batch_writes_csv_and_json(tmp_path, monkeypatch):
    infile = tmp_path / "addrs.txt"
    infile.write_text("# comment\n0x" + "1" * 40 + "\n\nbad\n")
    from radar.core.evaluate import evaluate

    def fake(chain, address, address_type=None):
        if address == "bad":
            raise batch_cli.AnalyzerError("Invalid or missing address", 400)
        payload = evaluate(BLACKLIST_TOKEN, None, None).to_dict()
        return {"chain": "Ethereum", "address": address,
                "riskScore": {"score": payload["score"], "label": payload["label"]},
                "findings": payload["findings"], "metadata": {"addressType": "contract"}}

    monkeypatch.setattr(batch_cli, "analyze_contract", fake)
    out_csv, out_json = tmp_path / "out.csv", tmp_path / "out.json"
    rc = batch_cli.main(["--infile", str(infile), "--out-csv", str(out_csv), "--out-json", str(out_json),
                         "--concurrency", "1"])
    assert rc == 0

    rows = {r["address"]: r for r in csv.DictReader(out_csv.open())}
    assert rows["bad"]["error"] == "Invalid or missing address"
    good = rows["0x" + "1" * 40]
    assert good["ownerPrivileges"] == "WARN(18)"
    assert good["label"] == "Medium"
    assert len(json.loads(out_json.read_text())) == 2


def test_offline_bad_explorer_file_is_ignored(tmp_path, capsys):
    code = tmp_path / "code.hex"
    code.write_text(MINT_AND_DELEGATECALL)
    info = tmp_path / "explorer.json"
    info.write_text("{broken")
    assert cli.main(["--bytecode-file", str(code), "--explorer-file", str(info), "--json"]) == 0
    captured = capsys.readouterr()
    assert "treating explorer info as unavailable" in captured.err
    out = json.loads(captured.out)
    assert out["findings"]["verifiedSource"]["penalty"] == 10


def test_offline_explorer_file_wrong_shape(tmp_path, capsys):
    info = tmp_path / "explorer.json"
    info.write_text(json.dumps({"isVerified": "definitely"}))
    assert cli.main(["--explorer-file", str(info)]) == 0
    assert "ValidationError" in capsys.readouterr().err
