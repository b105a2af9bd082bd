import pytest

from scanstation.config.settings import PathConfig
from scanstation import main as cli


@pytest.fixture()
def db_path(tmp_path, monkeypatch):
    monkeypatch.setattr(PathConfig, "LOG_DIR", str(tmp_path / "logs"))
    return str(tmp_path / "cli.db")


def run(db_path, *argv):
    return cli.main(["--db", db_path, *argv])


def test_enroll_then_scan_bare_code(db_path, capsys):
    assert run(db_path, "enroll", "Bob", "EE", "xyz789") == 0
    assert "Subject added: Bob (XYZ789)" in capsys.readouterr().out

    assert run(db_path, "scan", "XYZ789") == 0
    out = capsys.readouterr().out
    assert "Bob recorded successfully! (Barcode)" in out
    assert "Bob - attended 1 time" in out

    assert run(db_path, "scan", "XYZ789") == 0
    assert "Bob was already scanned today!" in capsys.readouterr().out


def test_enroll_rejects_bad_code(db_path, capsys):
    assert run(db_path, "enroll", "Bob", "EE", "XY") == 1
    assert "Enrollment rejected" in capsys.readouterr().out


def test_records_students_and_export(db_path, tmp_path, capsys):
    run(db_path, "enroll", "Alice", "CS", "ABC123")
    run(db_path, "scan", "Name=Alice;Major=CS;Neptun=ABC123")
    capsys.readouterr()

    assert run(db_path, "records") == 0
    out = capsys.readouterr().out
    assert "Neptun" in out and "ABC123" in out

    assert run(db_path, "students") == 0
    assert "ABC123" in capsys.readouterr().out

    out_csv = tmp_path / "out.csv"
    assert run(db_path, "export", str(out_csv)) == 0
    lines = out_csv.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "ID,Name,Major,Neptun,Date,Scans"
    assert lines[1].startswith("1,Alice,CS,ABC123,")


def test_keyboard_only_station_processes_stdin(db_path, monkeypatch):
    import io
    monkeypatch.setattr("sys.stdin", io.StringIO("Name=Alice;Neptun=ABC123\n"))
    station = cli.ScanStation(db_path=db_path, use_camera=False, use_keyboard=True, use_hardware=False)
    station.keyed_input.start()
    station.keyed_input.join(timeout=2)
    try:
        assert station.ledger.total_scans("ABC123") == 1
        assert station.status_board.current.payload.name == "Alice"
    finally:
        station.stop()


def test_camera_setup_failure_falls_back_to_keyboard(db_path, monkeypatch):
    camera_manager = pytest.importorskip("scanstation.core.camera_manager")
    pytest.importorskip("scanstation.core.qr_decoder")
    pytest.importorskip("scanstation.ui.display")

    def no_picamera(*args, **kwargs):
        raise ImportError("No module named 'picamera2'")

    monkeypatch.setattr(camera_manager, "PiCameraManager", no_picamera)
    station = cli.ScanStation(
        db_path=db_path, use_camera=True, use_keyboard=True,
        use_hardware=False, camera_backend="picamera2",
    )
    try:
        assert station.camera is None
        assert station.frame_producer is None
        assert station.display is None
        assert station.keyed_input is not None
        assert station.coordinator.submit("Name=Alice;Neptun=ABC123").total_scans == 1
    finally:
        station.stop()
