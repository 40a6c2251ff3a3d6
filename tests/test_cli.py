"""
Tests for the fieldline CLI.
"""
import json

import cv2
import pytest
import yaml

from fieldline_cli.cli import main


class TestListCommand:

    def test_list(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "soccer_11v11" in out
        assert "11v11 Full Field" in out

    def test_list_json_with_extra_directory(self, capsys, tmp_path, template_doc):
        (tmp_path / "mini.yaml").write_text(yaml.safe_dump(template_doc))

        assert main(["--templates-dir", str(tmp_path), "list", "--json"]) == 0
        listed = json.loads(capsys.readouterr().out)
        assert [t["id"] for t in listed] == ["mini", "soccer_11v11"]


class TestValidateCommand:

    def test_builtin_is_valid(self, capsys):
        assert main(["validate", "soccer_11v11"]) == 0
        assert "soccer_11v11: valid" in capsys.readouterr().out

    def test_file_with_errors(self, capsys, tmp_path, template_doc):
        template_doc["interiorElements"]["fixedElements"].append("goal_box")
        path = tmp_path / "mini.yaml"
        path.write_text(yaml.safe_dump(template_doc))

        assert main(["validate", str(path), "--json"]) == 1
        issues = json.loads(capsys.readouterr().out)
        assert issues[0]["code"] == "fixed_elements.unknown"

    def test_unknown_template(self, capsys):
        assert main(["validate", "rugby"]) == 1
        assert "not available" in capsys.readouterr().err


class TestBuildCommand:

    def test_build_custom_size(self, capsys):
        assert main(["build", "soccer_11v11", "--width", "68", "--length", "105"]) == 0
        output = json.loads(capsys.readouterr().out)

        assert output["widthMeters"] == 68
        primitives = {p["elementId"]: p for p in output["primitives"]}
        assert len(primitives) == 16
        assert primitives["penalty_area_top"]["x"] == pytest.approx(13.85)
        assert primitives["center_circle"]["radius"] == 9.15

    def test_build_defaults(self, capsys):
        assert main(["build", "soccer_11v11"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert (output["widthMeters"], output["lengthMeters"]) == (64, 100)

    def test_build_invalid_size(self, capsys):
        assert main(["build", "soccer_11v11", "--width", "0"]) == 1
        assert "width" in capsys.readouterr().err


class TestProjectAndRender:

    def test_project(self, capsys, field_config_yaml):
        assert main(["project", str(field_config_yaml), "--origin", "0", "0"]) == 0
        output = json.loads(capsys.readouterr().out)

        assert output["scale"] == 4
        assert output["origin"] == [0, 0]
        assert output["configuration"]["lineColor"] == "yellow"
        assert len(output["primitives"]) == 16
        assert output["primitives"][0]["angle"] == 30

    def test_project_out_of_bounds(self, capsys, tmp_path):
        path = tmp_path / "field.yaml"
        path.write_text("templateId: soccer_11v11\nlengthMeters: 150\nwidthMeters: 64\n")

        assert main(["project", str(path)]) == 1
        assert "outside bounds" in capsys.readouterr().err

    def test_project_missing_file(self, capsys, tmp_path):
        assert main(["project", str(tmp_path / "nope.yaml")]) == 1

    def test_render_png(self, capsys, tmp_path, field_config_yaml):
        output = tmp_path / "preview.png"
        assert main(["render", str(field_config_yaml), "-o", str(output)]) == 0

        image = cv2.imread(str(output))
        assert image.shape == (720, 1280, 3)

    def test_no_command(self, capsys):
        assert main([]) == 1
