"""Generates a batch of challenge images in parallel.

Each non-blank line of the input file is one sample; a literal "\\n" inside a
line becomes a line break in the image. Images are written as
`<out_dir>/<id>.png` and a `meta.csv` file records, per sample, the text, the
font and every distortion parameter, so each image can be replayed.
"""

from functools import partial
from pathlib import Path

import fire
import numpy as np
import pandas as pd
from loguru import logger
from tqdm.contrib.concurrent import thread_map

from glyphwarp.config import Settings
from glyphwarp.env import OUTPUT_ROOT
from glyphwarp.exceptions import EncodeError
from glyphwarp.generator import CaptchaGenerator
from glyphwarp.run import configure_logging


def read_samples(input_path):
    """Reads the samples to render from a UTF-8 text file, one per line."""
    lines = Path(input_path).read_text(encoding="utf-8").splitlines()
    return [line.replace("\\n", "\n") for line in lines if line.strip()]


def worker_fn(args, generator, out_dir, effects=True):
    """Renders and saves a single sample.

    Args:
        args (tuple): The sample ID, its text and the `np.random.SeedSequence`
            seeding its random generator.
        generator (CaptchaGenerator): The shared generator.
        out_dir (Path): The directory to write the image to.
        effects (bool, optional): Whether to apply the distortion pipeline.

    Returns:
        dict or None: The metadata row of the sample, or None if it was
        skipped.
    """
    id_, text, seed = args
    try:
        result = generator.process(text, effects=effects, rng=np.random.default_rng(seed))
    except EncodeError as e:
        logger.warning(f"Skipping sample {id_} ({text!r}): {e}")
        return None

    (Path(out_dir) / f"{id_}.png").write_bytes(result.png)

    height, width = result.image.shape[:2]
    row = {"id": id_, "text": text, "font_path": str(result.font_path), "width": width, "height": height}
    if result.effects is not None:
        row.update(result.effects.as_dict())
    return row


def run(
    input_path,
    out_dir=None,
    effects=True,
    max_workers=8,
    n_limit=None,
    seed=None,
    fonts_dir=None,
    config_file=None,
    verbose=False,
):
    """Generates one image per sample of `input_path`.

    Args:
        input_path (str): The text file with one sample per line.
        out_dir (str, optional): The output directory. Defaults to `OUTPUT_ROOT`.
        effects (bool, optional): Whether to distort the images. Defaults to True.
        max_workers (int, optional): The number of worker threads. Defaults to 8.
        n_limit (int, optional): Only generate the first `n_limit` samples.
        seed (int, optional): Seeds the per-sample random generators, making the
            whole batch reproducible regardless of thread scheduling.
        fonts_dir (str, optional): The directory to pick typefaces from.
        config_file (str, optional): A YAML file with `Settings` values.
        verbose (bool, optional): If True, enables debug logging.

    Returns:
        str or None: The path of the metadata CSV, or None if nothing was
        generated.
    """
    settings = Settings(yaml_file=config_file)
    configure_logging("DEBUG" if verbose else settings.log_level)

    samples = read_samples(input_path)
    if n_limit is not None:
        samples = samples[: int(n_limit)]

    seeds = np.random.SeedSequence(seed).spawn(len(samples))
    args = [(f"{i:06d}", text, sample_seed) for i, (text, sample_seed) in enumerate(zip(samples, seeds))]

    out_dir = Path(out_dir) if out_dir else OUTPUT_ROOT
    out_dir.mkdir(parents=True, exist_ok=True)

    generator = CaptchaGenerator(fonts_dir=fonts_dir or settings.fonts_dir, config=settings.render)
    f_with_generator = partial(worker_fn, generator=generator, out_dir=out_dir, effects=effects)
    results = thread_map(f_with_generator, args, max_workers=int(max_workers), desc="Generating images")

    data = [res for res in results if res is not None]
    if not data:
        logger.warning("No images generated.")
        return None

    meta_path = out_dir / "meta.csv"
    pd.DataFrame(data).to_csv(meta_path, index=False)
    logger.info(f"Generated {len(data)} of {len(samples)} images in {out_dir}")
    return str(meta_path)


if __name__ == "__main__":
    fire.Fire(run)
