import numpy as np
import pandas as pd
import pytest

import main
from denoisers.impulse import clean_image
from scripts.data_gen import add_salt_pepper, make_bars
from scripts.utils import ImageLoadError, load_image, save_image


def test_cli_cleans_file(tmp_path):
    noisy = add_salt_pepper(make_bars(32), amount=0.05, seed=2)
    src = tmp_path / "noisy.png"
    dst = tmp_path / "out" / "clean.png"
    save_image(noisy, src)

    assert main.main([str(src), str(dst)]) == 0
    np.testing.assert_array_equal(load_image(dst), clean_image(load_image(src)))


def test_cli_missing_input(tmp_path, capsys):
    dst = tmp_path / "clean.png"
    assert main.main([str(tmp_path / "nope.png"), str(dst)]) == 1
    assert not dst.exists()
    assert "Error:" in capsys.readouterr().err


def test_cli_uniform_image_writes_nothing(tmp_path):
    src = tmp_path / "flat.png"
    dst = tmp_path / "clean.png"
    save_image(np.full((8, 8, 3), 40, dtype=np.uint8), src)
    assert main.main([str(src), str(dst)]) == 1
    assert not dst.exists()


def test_cli_requires_both_paths():
    with pytest.raises(SystemExit) as info:
        main.main(["only_one.png"])
    assert info.value.code == 2


def test_load_image_expands_grayscale(tmp_path):
    path = tmp_path / "gray.png"
    save_image(np.arange(64, dtype=np.uint8).reshape(8, 8), path)
    img = load_image(path)
    assert img.shape == (8, 8, 3)
    np.testing.assert_array_equal(img[:, :, 0], img[:, :, 2])


def test_load_image_rejects_garbage(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ImageLoadError):
        load_image(path)


def test_demo_pipeline_writes_summary(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "denoisers: [impulse, median, bogus]\n"
        "median: {size: 3}\n"
        "demo: {amount: 0.05, seed: 1, include_astronaut: false}\n",
        encoding="utf-8")

    csv_paths = main.run_pipeline(str(tmp_path / "results"), demo=True, config_path=str(cfg))
    df = pd.read_csv(csv_paths["sp"])
    assert set(df["algorithm"]) == {"impulse", "median"}
    assert len(df) == 4
    assert (tmp_path / "results" / "sp" / "bars_sp_impulse.png").exists()
    impulse = df[df["algorithm"] == "impulse"]
    assert (impulse["psnr"] > 25).all()


def test_batch_pipeline_reads_data_dir(tmp_path):
    data_dir = tmp_path / "data"
    save_image(add_salt_pepper(make_bars(32), amount=0.05, seed=4), data_dir / "sample.png")
    cfg = tmp_path / "config.yaml"
    cfg.write_text(f"denoisers: [impulse]\ndata_dir: {data_dir.as_posix()}\n", encoding="utf-8")

    csv_paths = main.run_pipeline(str(tmp_path / "results"), demo=False, config_path=str(cfg))
    df = pd.read_csv(csv_paths["unknown"])
    assert list(df["image"]) == ["sample"]
    assert df["param_dirty_pixels"].iloc[0] > 0
    assert (tmp_path / "results" / "unknown" / "sample_impulse.png").exists()
