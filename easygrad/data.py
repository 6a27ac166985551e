import numpy as np


def make_moons(n_samples=100, noise=0.1, seed=None):
    """
    两个交错的半月形, 二分类玩具数据集

    Returns:
        X: [n_samples, 2]
        y: [n_samples], 取值 +1 / -1
    """
    rng = np.random.RandomState(seed)
    n_out = n_samples // 2
    n_in = n_samples - n_out

    outer = np.linspace(0, np.pi, n_out)
    inner = np.linspace(0, np.pi, n_in)
    X = np.vstack([
        np.column_stack([np.cos(outer), np.sin(outer)]),
        np.column_stack([1 - np.cos(inner), 1 - np.sin(inner) - 0.5]),
    ])
    y = np.hstack([-np.ones(n_out), np.ones(n_in)])

    if noise:
        X += rng.normal(scale=noise, size=X.shape)

    perm = rng.permutation(n_samples)
    return X[perm], y[perm]


def make_regression(n_samples=100, seed=42):
    """回归玩具数据: y = 0.5*sin(x1) + 0.3*x2^2 + 0.1*x1*x2 + 0.2 + 噪声"""
    rng = np.random.RandomState(seed)
    X = rng.uniform(-2, 2, (n_samples, 2))
    x1, x2 = X[:, 0], X[:, 1]
    y = 0.5 * np.sin(x1) + 0.3 * x2 ** 2 + 0.1 * x1 * x2 + 0.2
    return X, y + 0.05 * rng.randn(n_samples)
