import json

import pytest

from uml2gltf.cli import build_parser, main, run_generate


def test_generate(tmp_path, sample_file, capsys):
    output = tmp_path / "out" / "model.gl"

    assert main(["generate", str(sample_file), "-o", str(output)]) == 0

    data = json.loads(output.read_text())
    assert data["asset"]["extras"]["extuml"]["version"] == "0.1"
    assert data["asset"]["generator"].startswith("uml2gltf v")
    assert set(data["asset"]["extras"]["camera"]) == {"bounds", "recommended"}
    assert len(data["nodes"]) == 2 + 1 + 1
    assert f"Successfully generated: {output}" in capsys.readouterr().out


def test_generate_with_viewer(tmp_path, sample_file, capsys):
    output = tmp_path / "model.gltf"
    html = tmp_path / "model.html"

    assert main(["generate", "-e", str(sample_file), "-o", str(output), "--html-output", str(html)]) == 0

    assert 'const GLTF_PATH = "model.gltf";' in html.read_text()
    assert capsys.readouterr().out.count("Successfully generated") == 2


def test_missing_input(tmp_path, capsys):
    assert main(["generate", str(tmp_path / "nope.extuml"), "-o", str(tmp_path / "x.gltf")]) == 1
    assert "extuml file not found" in capsys.readouterr().err


def test_bad_header(tmp_path, capsys):
    source = tmp_path / "bad.extuml"
    source.write_text("class A {\n}\n")

    assert main(["generate", str(source), "-o", str(tmp_path / "x.gltf")]) == 1
    assert "E100" in capsys.readouterr().err


def test_input_is_required(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-o", str(tmp_path / "x.gltf")])
    assert excinfo.value.code == 2


def test_output_is_required(sample_file):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["generate", str(sample_file)])


def test_run_generate_is_reproducible(tmp_path, sample_file):
    first, second = tmp_path / "a.gltf", tmp_path / "b.gltf"

    run_generate(sample_file, first, generated_at="2024-01-01T00:00:00Z")
    run_generate(sample_file, second, generated_at="2024-01-01T00:00:00Z")

    assert first.read_bytes() == second.read_bytes()
    assert json.loads(first.read_text())["asset"]["extras"]["extuml"]["generatedAt"] == "2024-01-01T00:00:00Z"
