from __future__ import annotations

import json

import pytest

from tbwriter.__main__ import main
from tbwriter.config import ConfigError, get_paths, validate_run_name
from tbwriter.reader import read_event_file


def test_demo_then_inspect(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["demo", "--logdir", str(tmp_path), "--run", "exp/train", "--steps", "3", "--bins", "8", "--samples", "100"])
    run_dir = tmp_path / "exp" / "train"
    files = sorted(run_dir.glob("events.out.tfevents.*"))
    assert len(files) == 1

    events = read_event_file(files[0])
    assert len(events) == 4
    assert events[0].file_version == "brain.Event:2"
    assert [e.step for e in events[1:]] == [0, 1, 2]
    tags = [v.tag for v in events[1].summary.value]
    assert tags == ["loss", "weights/layer1", "weights/final"]
    assert events[1].summary.value[0].simple_value == 10.0
    assert sum(events[2].summary.value[1].histo.bucket) == 100

    log_lines = (run_dir / "tbwriter.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["event"] for line in log_lines] == ["demo_start"] + ["summary_written"] * 3 + ["demo_done"]

    capsys.readouterr()
    main(["inspect", str(files[0])])
    out = capsys.readouterr().out.splitlines()
    assert "file_version='brain.Event:2'" in out[0]
    assert "loss=scalar(10)" in out[1]
    assert out[-1] == "4 events OK"


def test_inspect_rejects_corrupt_file(tmp_path) -> None:
    main(["demo", "--logdir", str(tmp_path), "--run", "r", "--steps", "1", "--samples", "10"])
    (path,) = (tmp_path / "r").glob("events.out.tfevents.*")
    raw = bytearray(path.read_bytes())
    raw[-1] ^= 0xFF
    path.write_bytes(bytes(raw))
    with pytest.raises(SystemExit, match="Corrupt event file"):
        main(["inspect", str(path)])


def test_logdir_from_environment(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TBWRITER_LOGDIR", str(tmp_path))
    assert get_paths(None).root == tmp_path.resolve()
    monkeypatch.delenv("TBWRITER_LOGDIR")
    with pytest.raises(ConfigError):
        get_paths(None)


@pytest.mark.parametrize("bad", ["", "  ", ".", "..", "../escape", "/abs/run", "a\\b"])
def test_invalid_run_names(bad: str) -> None:
    with pytest.raises(ConfigError):
        validate_run_name(bad)
