import json

import pytest

import hingeboxgen as gen


def test_summary_to_stdout(capsys):
    assert gen.main(["--summary"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [p["name"] for p in payload["panels"]] == list(gen.PANEL_NAMES)
    assert payload["warnings"] == []
    assert payload["origin"] == [-12.0, -7.5]
    assert "outers" not in payload["panels"][0]


def test_full_output_to_file(tmp_path):
    out = tmp_path / "box.json"
    assert gen.main(["--out", str(out), "--width", "100"]) == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["params"]["width"] == 100.0
    bottom = payload["panels"][0]
    assert bottom["outers"]
    assert bottom["width"] == 100.0


def test_params_file_with_override(tmp_path, capsys):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"width": 120, "tabWidth": 8, "addRightHole": False}), encoding="utf-8")
    assert gen.main(["--params", str(params), "--height", "60", "--summary"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["params"]["width"] == 120.0
    assert payload["params"]["height"] == 60.0
    assert payload["params"]["tab_width"] == 8.0
    assert payload["params"]["add_right_hole"] is False


def test_params_file_must_hold_an_object(tmp_path):
    params = tmp_path / "params.json"
    params.write_text("[1, 2]", encoding="utf-8")
    assert gen.main(["--params", str(params)]) == 2


def test_invalid_value_exits_2(capsys, caplog):
    assert gen.main(["--kerf", "-1"]) == 2
    assert capsys.readouterr().out == ""
    assert "kerf" in caplog.text


def test_no_right_hole(capsys):
    assert gen.main(["--no-right-hole"]) == 0
    payload = json.loads(capsys.readouterr().out)
    right = payload["panels"][5]
    assert right["name"] == "Right"
    assert len(right["holes"]) == 1
    assert payload["params"]["add_right_hole"] is False


def test_warnings_are_reported(capsys):
    assert gen.main(["--margin", "1", "--summary"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [w["code"] for w in payload["warnings"]] == ["GAP_RAISED"]
    assert payload["warnings"][0]["severity"] == "info"


def test_version(capsys):
    with pytest.raises(SystemExit) as ei:
        gen.main(["--version"])
    assert ei.value.code == 0
    assert gen.__version__ in capsys.readouterr().out
