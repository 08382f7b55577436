"""End-to-end tests for scripts/render_sprite.py."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import numpy as np
import pytest
import yaml

from spriteforge.raster.symmetry import BoxSettings, render_box_direct
from spriteforge.utils import fs, hashing

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "render_sprite.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("render_sprite", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "render.yaml"
    fs.atomic_yaml_dump(
        {
            "logging": {"level": "WARNING"},
            "output": {"directory": str(tmp_path / "out")},
            "symmetry": {"algorithm": "incremental"},
        },
        path,
    )
    return path


class TestRenderCli:
    def test_box(self, cli, tmp_path: Path, config_path: Path) -> None:
        out = tmp_path / "box.rgba"
        code = cli.main([
            "--box", "16", "8", "--radius", "2", "--border", "1",
            "--out", str(out), "--config", str(config_path),
        ])
        assert code == 0

        data = out.read_bytes()
        assert len(data) == 16 * 8 * 4
        expected = render_box_direct(BoxSettings(width=16, height=8, corner_radius=2))
        np.testing.assert_array_equal(np.frombuffer(data, dtype=np.uint8), expected)

        meta = yaml.safe_load(out.with_name("box.rgba.yaml").read_text())
        assert meta["name"] == "box_16x8"
        assert (meta["width"], meta["height"]) == (16, 8)
        assert meta["bytes"] == len(data)
        assert meta["sha256"] == hashing.sha256_bytes(data)
        assert meta["algorithm"] == "incremental"
        assert meta["source"] == "box"

    def test_algorithm_override(self, cli, tmp_path: Path, config_path: Path) -> None:
        out = tmp_path / "box.rgba"
        assert cli.main([
            "--box", "8", "8", "--algorithm", "closed_form",
            "--out", str(out), "--config", str(config_path),
        ]) == 0
        meta = fs.load_yaml(out.with_name("box.rgba.yaml"))
        assert meta["algorithm"] == "closed_form"

    def test_sprite_default_output(self, cli, tmp_path: Path, config_path: Path, example_sprite_path: Path) -> None:
        code = cli.main(["--sprite", str(example_sprite_path), "--config", str(config_path)])
        assert code == 0
        out = tmp_path / "out" / "icon.rgba"
        assert out.stat().st_size == 32 * 32 * 4
        meta = fs.load_yaml(out.with_name("icon.rgba.yaml"))
        assert meta["source"] == str(example_sprite_path)
        assert "algorithm" not in meta

    def test_metadata_disabled(self, cli, tmp_path: Path) -> None:
        cfg = tmp_path / "quiet.yaml"
        fs.atomic_yaml_dump(
            {"logging": {"level": "ERROR"}, "output": {"directory": str(tmp_path), "write_metadata": False}},
            cfg,
        )
        out = tmp_path / "b.rgba"
        assert cli.main(["--box", "8", "8", "--out", str(out), "--config", str(cfg)]) == 0
        assert out.exists()
        assert not out.with_name("b.rgba.yaml").exists()

    def test_missing_sprite(self, cli, tmp_path: Path, config_path: Path) -> None:
        code = cli.main(["--sprite", str(tmp_path / "none.yaml"), "--config", str(config_path)])
        assert code == 1

    def test_invalid_sprite(self, cli, tmp_path: Path, config_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text(yaml.safe_dump({"name": "bad", "canvas": {"width": 9, "height": 8}}))
        assert cli.main(["--sprite", str(bad), "--config", str(config_path)]) == 1

    def test_malformed_sprite_yaml(self, cli, tmp_path: Path, config_path: Path) -> None:
        bad = tmp_path / "broken.yaml"
        bad.write_text("schema: [unclosed\n")
        assert cli.main(["--sprite", str(bad), "--config", str(config_path)]) == 1

    def test_invalid_box_size(self, cli, tmp_path: Path, config_path: Path) -> None:
        out = tmp_path / "odd.rgba"
        assert cli.main(["--box", "7", "8", "--out", str(out), "--config", str(config_path)]) == 1
        assert not out.exists()

    def test_bad_config(self, cli, tmp_path: Path) -> None:
        cfg = tmp_path / "broken.yaml"
        cfg.write_text(yaml.safe_dump({"logging": {"level": "INFO"}}))
        assert cli.main(["--box", "8", "8", "--config", str(cfg)]) == 2

    def test_malformed_config_yaml(self, cli, tmp_path: Path) -> None:
        cfg = tmp_path / "render.yaml"
        cfg.write_text("logging: {level: INFO\n")
        assert cli.main(["--box", "8", "8", "--config", str(cfg)]) == 2

    def test_missing_config(self, cli, tmp_path: Path) -> None:
        assert cli.main(["--box", "8", "8", "--config", str(tmp_path / "absent.yaml")]) == 2

    def test_requires_input(self, cli) -> None:
        with pytest.raises(SystemExit):
            cli.parse_args([])
