import hashlib
import re

import pytest

from powsim import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "init_logging", lambda level: None)

def test_timeout_stops_interactive_run(capsys):
    code = cli.main(["--data", "x", "--difficulty", "8", "--timeout", "0.3"])
    assert code == 1
    assert "Mining process stopped by user." in capsys.readouterr().out

def test_interactive_run_finds_nonce(capsys):
    code = cli.main(["--data", "test", "--difficulty", "1", "--timeout", "10"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Success! Found nonce:" in out
    assert "Final Hash: 0" in out

def test_single_hash_batch(capsys):
    code = cli.main(["--data", "block", "--single", "--difficulty", "2"])
    assert code == 0
    out = capsys.readouterr().out
    m = re.search(r"nonce=(\d+) hash=([0-9a-f]{64})", out)
    assert m is not None
    nonce, digest = int(m.group(1)), m.group(2)
    assert digest == hashlib.sha256(f"block{nonce}".encode()).hexdigest()
    assert digest.startswith("00")

def test_batch_iteration_ceiling(capsys):
    code = cli.main(["--data", "x", "--max-iters", "5", "--difficulty", "8"])
    assert code == 1
    assert "no solution within 5 iterations" in capsys.readouterr().out

def test_timeout_rejected_for_batch_runs():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--single", "--difficulty", "8", "--timeout", "1"])
    assert exc.value.code == 2
