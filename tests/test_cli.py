# tests/test_cli.py
import json

import pytest

from coxsize.cli import main

REF_ARGS = ["--theta", "2", "--psi", "0.505", "--p", "0.39", "--rho2", "0.017424"]


def test_size_mode_prints_table(capsys):
    main(REF_ARGS)
    out = capsys.readouterr().out
    header = out.splitlines()[0].split()
    assert header == ["power", "theta", "p", "psi", "rho2", "alpha", "D", "N", "n1", "n2"]
    assert out.splitlines()[1].split()[-4:] == ["70", "139", "54", "85"]


def test_grid_from_flags(capsys):
    main(["--theta", "1.5", "2", "--psi", "0.5", "--power", "0.8", "0.9"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1 + 4


def test_json_and_csv_reports(tmp_path, capsys):
    out_json = tmp_path / "report" / "sizes.json"
    out_csv = tmp_path / "sizes.csv"
    main(REF_ARGS + ["--out-json", str(out_json), "--out-csv", str(out_csv)])
    report = json.loads(out_json.read_text(encoding="utf-8"))
    assert report["inputs"]["theta"] == [2.0]
    assert report["results"][0]["N"] == 139
    assert out_csv.read_text(encoding="utf-8").splitlines()[0] == "power,theta,p,psi,rho2,alpha,D,N,n1,n2"
    assert "Wrote report" in capsys.readouterr().out


def test_degenerate_theta_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--theta", "1", "--psi", "0.5"])
    assert exc.value.code == 2
    assert "theta must differ from 1" in capsys.readouterr().err


def test_allow_degenerate_writes_null(tmp_path):
    out_json = tmp_path / "sizes.json"
    with pytest.warns(UserWarning):
        main(["--theta", "1", "2", "--psi", "0.5", "--allow-degenerate", "--out-json", str(out_json)])
    results = json.loads(out_json.read_text(encoding="utf-8"))["results"]
    assert results[0]["D"] is None
    assert results[1]["D"] == 66


def test_power_mode(capsys):
    main(["--mode", "power", "--n", "139", "--theta", "2", "--psi", "0.505", "--p", "0.39", "--rho2", "0.017424"])
    out = capsys.readouterr().out
    assert out.splitlines()[0].split()[-2:] == ["D", "power"]


def test_power_mode_requires_n():
    with pytest.raises(SystemExit) as exc:
        main(["--mode", "power", "--theta", "2", "--psi", "0.5"])
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "extra",
    [["--power", "0.9"], ["--nonfinite", "drop"]],
)
def test_power_mode_rejects_size_only_flags(extra, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--mode", "power", "--n", "139", "--theta", "2", "--psi", "0.5"] + extra)
    assert exc.value.code == 2
    assert "--mode size only" in capsys.readouterr().err


def test_size_mode_rejects_n(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--n", "139", "--theta", "2", "--psi", "0.5"])
    assert exc.value.code == 2
    assert "--mode power only" in capsys.readouterr().err
