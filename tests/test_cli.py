import pytest

from almanacclock import cli
from almanacclock.compute import compute_clock_state


@pytest.fixture(autouse=True)
def offline(monkeypatch, fake_service):
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    monkeypatch.setattr(
        cli,
        "compute_clock_state",
        lambda context, events=(): compute_clock_state(context, events, service=fake_service, eclipse_table={}),
    )


def test_summary_from_coordinates(capsys):
    assert cli.main(["--lat", "45", "--lng", "-93", "--when", "2024-06-21 12:00"]) == 0
    out = capsys.readouterr().out
    assert "Location: 45.00, -93.00" in out
    assert "day 173 of 366, Cancer" in out
    assert "Strawberry Moon" in out
    assert "sunrise" in out
    assert "* Summer Solstice" in out


def test_events_file_and_svg(tmp_path, capsys):
    events = tmp_path / "events.json"
    events.write_text('[{"id": "1", "name": "Anniversary", "month": 6, "day": 21}]')
    svg = tmp_path / "out" / "clock.svg"

    code = cli.main(
        ["--lat", "45", "--lng", "-93", "--when", "2024-06-21 12:00", "--events", str(events), "--svg", str(svg)]
    )

    assert code == 0
    assert "* Anniversary (6/21)" in capsys.readouterr().out
    assert svg.read_text().startswith("<svg")


def test_invalid_location_reports_error(capsys):
    assert cli.main(["--lat", "95", "--lng", "0", "--when", "2024-06-21 12:00"]) == 1
    assert "latitude" in capsys.readouterr().err


@pytest.mark.parametrize(
    "content",
    ['[{"id": "1", "name": ', "[5]", '[{"id": "1", "name": "Trip", "month": 1, "day": 1, "endMonth": "x", "endDay": 3}]'],
)
def test_bad_events_file_reports_error(tmp_path, capsys, content):
    events = tmp_path / "events.json"
    events.write_text(content)
    code = cli.main(["--lat", "45", "--lng", "-93", "--when", "2024-06-21 12:00", "--events", str(events)])
    assert code == 1
    assert capsys.readouterr().err.startswith("error: ")


def test_location_is_required():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--lat", "45"])
    assert exc.value.code == 2
