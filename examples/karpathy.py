"""
Scalar Example
==============

The smallest useful graph: y = relu(-x * 3 + 2) at x = -3.

    -x * 3 + 2 = 11 > 0, so relu passes the gradient through and
    dy/dx = -3.
"""

import argparse

import adgraph as ag


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--x", type=float, default=-3.0, help="input value")
    args = parser.parse_args()

    x = ag.scalar(args.x, name="x")
    y = ag.relu(-x * 3 + 2)
    y.backward()

    print(f"y = {y}")
    print(f"value: {y.value:g}")
    print(f"dy/dx: {x.grad:g}")


if __name__ == "__main__":
    main()
