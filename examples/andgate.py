"""
AND Gate Example
================

Fit a single relu unit to the AND truth table:

    y_est = relu(w * x + b)

with w a 1x2 matrix and b a scalar. The loss is the raw difference
y_est - y, whose gradient only ever lowers an active output, so from
w = [1, 1], b = 0 training settles at w = [0.5, 0.5], b = -1 with
the (1, 1) sample exactly on the relu hinge.
"""

import argparse
import logging

import numpy as np

import adgraph as ag
from adgraph.logger import get_logger

logger = get_logger("examples.andgate")

SAMPLES = [
    ((0.0, 0.0), 0.0),
    ((1.0, 0.0), 0.0),
    ((0.0, 1.0), 0.0),
    ((1.0, 1.0), 1.0),
]


def train(epochs: int, lr: float):
    w = ag.matrix([[1.0, 1.0]], name="w")
    b = ag.scalar(0.0, name="b")

    for epoch in range(epochs):
        for x, y in SAMPLES:
            y_est = ag.relu(w * x + b)
            loss = y_est - y
            loss.backward()

            w.update(lr)
            b.update(lr)

        if epoch % 10 == 0:
            logger.debug("epoch %d: w=%s b=%g", epoch, w.value.ravel(), b.value)

    return w, b


def main():
    parser = argparse.ArgumentParser(description="Fit a relu unit to AND")
    parser.add_argument("--epochs", type=int, default=100)
    parser.add_argument("--lr", type=float, default=0.5)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    w, b = train(args.epochs, args.lr)
    logger.info("trained: w=%s b=%g", w.value.ravel(), b.value)

    for x, y in SAMPLES:
        y_est = ag.relu(w * x + b)
        logger.info("%s -> %.3f (target %g)", x, float(np.asarray(y_est.value)[0]), y)


if __name__ == "__main__":
    main()
