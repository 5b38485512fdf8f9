import numpy as np
from scipy.stats import uniform, norm, expon

DISTRIBUTIONS = ("uniform", "normal", "exponential", "diverse")


def _check_size(num_samples):
    if num_samples < 0:
        raise ValueError(f"num_samples must be non-negative, got {num_samples}")


def uniform_samples(num_samples: int, min_val: float, max_val: float, rng: np.random.Generator) -> np.ndarray:
    _check_size(num_samples)
    if max_val <= min_val:
        raise ValueError(f"max_val ({max_val}) must exceed min_val ({min_val})")
    return uniform(loc=min_val, scale=max_val - min_val).rvs(size=num_samples, random_state=rng)


def normal_samples(num_samples: int, mean: float, std_dev: float, rng: np.random.Generator) -> np.ndarray:
    _check_size(num_samples)
    if std_dev <= 0:
        raise ValueError(f"std_dev must be positive, got {std_dev}")
    return norm(loc=mean, scale=std_dev).rvs(size=num_samples, random_state=rng)


def exponential_samples(num_samples: int, lam: float, rng: np.random.Generator) -> np.ndarray:
    _check_size(num_samples)
    if lam <= 0:
        raise ValueError(f"rate lam must be positive, got {lam}")
    return expon(scale=1.0 / lam).rvs(size=num_samples, random_state=rng)


def diverse_samples(num_samples: int, min_val: float, max_val: float, rng: np.random.Generator) -> np.ndarray:
    """
    One third each of uniform, normal and exponential samples, shuffled together.
    The remainder of num_samples // 3 is dropped.
    """
    _check_size(num_samples)
    if max_val <= min_val:
        raise ValueError(f"max_val ({max_val}) must exceed min_val ({min_val})")
    third = num_samples // 3
    spread = max_val - min_val
    data = np.concatenate([
        uniform_samples(third, min_val, max_val, rng),
        normal_samples(third, (max_val + min_val) / 2, spread / 4, rng),
        exponential_samples(third, 2.0 / spread, rng),
    ])
    return rng.permutation(data)


def build_samples(distribution: str, params: dict, num_samples: int, rng: np.random.Generator) -> np.ndarray:
    distribution = distribution.lower()
    if distribution == "uniform":
        return uniform_samples(num_samples, params.get("min_val", 0.0), params.get("max_val", 1.0), rng)
    if distribution == "normal":
        return normal_samples(num_samples, params.get("mean", 0.0), params.get("std_dev", 1.0), rng)
    if distribution == "exponential":
        return exponential_samples(num_samples, params.get("lam", 1.0), rng)
    if distribution == "diverse":
        return diverse_samples(num_samples, params.get("min_val", 0.0), params.get("max_val", 1.0), rng)
    raise ValueError(f"Unknown distribution '{distribution}', expected one of {DISTRIBUTIONS}")


def build_sample_generator(distribution: str, params: dict, num_samples: int, rng: np.random.Generator):
    samples = build_samples(distribution, params, num_samples, rng)
    for s in samples:
        yield float(s)
