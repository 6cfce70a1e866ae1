"""
Matrix-Vector Example
=====================

s = sum(I * v + 2) for the 3x3 identity and v = [2, 4, 6].

Every output element depends on one row of I, so the gradient of the
matrix is the outer product of ones with v: every row equals v.
"""

import numpy as np

import adgraph as ag


def main():
    mat = ag.matrix(np.eye(3), name="I")
    v = ag.vector([2.0, 4.0, 6.0], name="v")

    y = mat * v + 2
    s = ag.sum(y)
    s.backward()

    print(f"s = {s}")
    print(f"value: {s.value:g}")
    print("dI:")
    print(mat.grad)
    print("dv:")
    print(v.grad)


if __name__ == "__main__":
    main()
