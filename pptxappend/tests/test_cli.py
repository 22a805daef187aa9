import io
import zipfile

from pptx import Presentation

from pptxappend.cli import main
from pptxappend.container.minimal_template import template_archive

SLIDES = """\
Slide
 Master 1
 TextBox
  Position [1080000, 720000]
  Line 000000 "Hello"
  Title true
  Font null
 ItemBox
  Position [0, 1800000, 9000000, 3000000]
  Item {"level": 0, "text": "first"}
  Item {"level": 1, "text": "second"}
Slide
 Master 2
"""


def _deck(tmp_path):
    path = tmp_path / "deck.pptx"
    path.write_bytes(template_archive().getvalue())
    return path


def test_cli_appends_slides_from_file(tmp_path, capsys) -> None:
    deck = _deck(tmp_path)
    slides = tmp_path / "slides.txt"
    slides.write_text(SLIDES, encoding="utf-8")

    exit_code = main([str(deck), str(slides)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out == f"Added 2 slides to {deck}\n"
    prs = Presentation(str(deck))
    assert len(prs.slides) == 2
    assert prs.slides[0].shapes.title.text_frame.text == "Hello"


def test_cli_reads_stdin_and_creates_new_deck(tmp_path, capsys, monkeypatch) -> None:
    deck = tmp_path / "new.pptx"
    monkeypatch.setattr("sys.stdin", io.StringIO(SLIDES))

    exit_code = main(["--new", str(deck)])

    assert exit_code == 0
    with zipfile.ZipFile(deck) as zf:
        assert "ppt/slides/slide2.xml" in zf.namelist()


def test_cli_rejects_empty_input(tmp_path, capsys, monkeypatch) -> None:
    deck = _deck(tmp_path)
    original = deck.read_bytes()
    monkeypatch.setattr("sys.stdin", io.StringIO("\n"))

    exit_code = main([str(deck)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert captured.err == "pptxappend: no slides to add\n"
    assert deck.read_bytes() == original


def test_cli_reports_protocol_errors(tmp_path, capsys) -> None:
    deck = _deck(tmp_path)
    original = deck.read_bytes()
    slides = tmp_path / "slides.txt"
    slides.write_text("Slide\n TextBox\n  Position [1]\n", encoding="utf-8")

    exit_code = main([str(deck), str(slides)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert captured.err.startswith("pptxappend: line 3: ")
    assert deck.read_bytes() == original


def test_cli_reports_failed_step_and_keeps_deck(tmp_path, capsys) -> None:
    deck = _deck(tmp_path)
    original = deck.read_bytes()
    slides = tmp_path / "slides.txt"
    slides.write_text("Slide\n Master 9\n", encoding="utf-8")

    exit_code = main([str(deck), str(slides)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "slide 1: slide-rels:" in captured.err
    assert deck.read_bytes() == original


def test_cli_refuses_to_overwrite_with_new(tmp_path, capsys) -> None:
    deck = _deck(tmp_path)
    slides = tmp_path / "slides.txt"
    slides.write_text(SLIDES, encoding="utf-8")

    exit_code = main(["--new", str(deck), str(slides)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Refusing to overwrite" in captured.err


def test_cli_missing_deck(tmp_path, capsys) -> None:
    slides = tmp_path / "slides.txt"
    slides.write_text(SLIDES, encoding="utf-8")

    exit_code = main([str(tmp_path / "missing.pptx"), str(slides)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Could not open presentation archive" in captured.err


def test_cli_rejects_unknown_arguments(capsys) -> None:
    exit_code = main(["deck.pptx", "slides.txt", "extra"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "unsupported arguments: extra" in captured.err


def test_cli_verbose_logs_steps(tmp_path, caplog) -> None:
    deck = _deck(tmp_path)
    slides = tmp_path / "slides.txt"
    slides.write_text(SLIDES, encoding="utf-8")

    with caplog.at_level("DEBUG", logger="pptxappend"):
        exit_code = main(["--verbose", str(deck), str(slides)])

    assert exit_code == 0
    assert any("Adding slide 1" in record.getMessage() for record in caplog.records)
