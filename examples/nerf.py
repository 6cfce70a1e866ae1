"""
Coordinate Network Example
==========================

Fit an image with a small MLP mapping pixel coordinates to colour:

    (x, y) -> positional encoding (8 frequencies, 32 features)
           -> 3 x [Linear(128) + relu] -> Linear(3) + sigmoid

One random pixel per step, squared error per channel, plain gradient
descent. Snapshots of the full reconstruction are written as training
goes, densely at first and sparser later.

Usage:
    python examples/nerf.py path/to/image.png --steps 20000 --out-dir nerf_out
"""

import argparse
import logging
import os

import matplotlib.pyplot as plt
import numpy as np

import adgraph as ag
from adgraph import nn
from adgraph.logger import get_logger

logger = get_logger("examples.nerf")


class NeRF(nn.Module):
    """Four-layer coordinate MLP."""

    def __init__(self, hidden: int = 128, n_frequencies: int = 8, rng=None):
        super().__init__()
        self.encoding = nn.PositionalEncoding(n_frequencies)
        in_features = self.encoding.output_size(2)
        self.layers = nn.Sequential(
            nn.Linear(in_features, hidden, rng=rng),
            nn.ReLU(),
            nn.Linear(hidden, hidden, rng=rng),
            nn.ReLU(),
            nn.Linear(hidden, hidden, rng=rng),
            nn.ReLU(),
            nn.Linear(hidden, 3, rng=rng),
            nn.Sigmoid(),
        )

    def forward(self, xy):
        return self.layers(self.encoding(xy))


def load_image(path: str) -> np.ndarray:
    """RGB image as floats in [0, 1], shape (height, width, 3)."""
    image = plt.imread(path)
    if image.dtype == np.uint8:
        image = image.astype(np.float64) / 255.0
    if image.ndim == 2:
        image = np.stack([image] * 3, axis=-1)
    return image[..., :3].astype(np.float64)


def render(model: NeRF, width: int, height: int) -> np.ndarray:
    out = np.zeros((height, width, 3))
    for py in range(height):
        for px in range(width):
            xy = ag.vector([px / width, py / height], requires_grad=False)
            out[py, px] = model(xy).value
    return out


def should_save(step: int) -> bool:
    if step < 2500:
        return step % 250 == 0
    if step < 10000:
        return step % 1000 == 0
    if step < 50000:
        return step % 5000 == 0
    return step % 10000 == 0


def main():
    parser = argparse.ArgumentParser(description="Fit an image with a coordinate MLP")
    parser.add_argument("image", help="image file readable by matplotlib")
    parser.add_argument("--steps", type=int, default=200001)
    parser.add_argument("--lr", type=float, default=0.15)
    parser.add_argument("--hidden", type=int, default=128)
    parser.add_argument("--frequencies", type=int, default=8)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out-dir", default="nerf_out")
    args = parser.parse_args()

    logger.setLevel(logging.INFO)

    target = load_image(args.image)
    height, width, _ = target.shape
    logger.info("loaded %s (%dx%d)", args.image, width, height)

    rng = np.random.default_rng(args.seed)
    model = NeRF(hidden=args.hidden, n_frequencies=args.frequencies, rng=rng)
    optimizer = ag.optim.SGD(model.parameters(), lr=args.lr)
    os.makedirs(args.out_dir, exist_ok=True)

    running, count = 0.0, 0
    for step in range(args.steps):
        px = int(rng.integers(width))
        py = int(rng.integers(height))

        xy = ag.vector([px / width, py / height], requires_grad=False)
        y_est = model(xy)
        loss = ag.pow(y_est - target[py, px], 2)
        loss.backward()
        optimizer.step()

        running += float(np.sum(loss.value))
        count += 1
        if step % 1000 == 0:
            logger.info("step %d: loss %.5f", step, running / count)
            running, count = 0.0, 0

        if should_save(step):
            path = os.path.join(args.out_dir, f"nerf_est{step}.png")
            plt.imsave(path, np.clip(render(model, width, height), 0.0, 1.0))
            logger.info("saved %s", path)


if __name__ == "__main__":
    main()
