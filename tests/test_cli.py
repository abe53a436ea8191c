import json

from click.testing import CliRunner

from src.cli import cli


def test_presets_lists_areas_and_states():
    result = CliRunner().invoke(cli, ["presets"])
    assert result.exit_code == 0
    assert "conus" in result.output
    assert "california" in result.output


def test_regions_json(tmp_path):
    regions_file = tmp_path / "states.json"
    regions_file.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "geometry": {
                            "type": "Polygon",
                            "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                        },
                        "properties": {"NAME": "Alpha"},
                    }
                ],
            }
        )
    )
    result = CliRunner().invoke(cli, ["regions", "--regions", str(regions_file), "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["success"]
    assert [r["name"] for r in payload["regions"]] == ["Alpha"]


def test_visible_rejects_unknown_season():
    result = CliRunner().invoke(cli, ["visible", "-s", "Monsoon"])
    assert result.exit_code != 0
