"""
Random hyper-parameter search for the LightGBM fraud model.

Each trial draws one configuration, cross-validates it with ``lgb.cv`` and
records the best mean validation score. The result table is sorted once,
after the last trial.
"""

import logging
import math
import time

import lightgbm as lgb
import numpy as np
import pandas as pd
from tqdm import tqdm

from .boosting import default_params
from .config import (
    RANDOM_SEED,
    CV_FOLDS,
    N_SEARCH_ITER,
    NUM_BOOST_ROUND,
    EARLY_STOPPING_ROUNDS,
)
from .csv_logger import format_seconds

log = logging.getLogger(__name__)

SEARCH_SPACE = {
    "learning_rate": (0.005, 0.3),  # log-uniform
    "num_leaves": (8, 256),
    "max_depth": (3, 12),
    "feature_fraction": (0.5, 1.0),
    "bagging_fraction": (0.5, 1.0),
}

PARAM_COLUMNS = [
    "learning_rate",
    "num_leaves",
    "max_depth",
    "feature_fraction",
    "bagging_fraction",
    "is_unbalance",
]
RESULT_COLUMNS = ["trial"] + PARAM_COLUMNS + ["score", "best_iteration"]

# the ranking assumes higher is better
MAXIMIZED_METRICS = ("auc", "average_precision")


def sample_hyperparameters(rng):
    """Draw one configuration; every parameter is sampled independently."""
    lr_low, lr_high = SEARCH_SPACE["learning_rate"]
    leaves_low, leaves_high = SEARCH_SPACE["num_leaves"]
    depth_low, depth_high = SEARCH_SPACE["max_depth"]
    return {
        "learning_rate": float(
            math.exp(rng.uniform(math.log(lr_low), math.log(lr_high)))
        ),
        "num_leaves": int(rng.integers(leaves_low, leaves_high + 1)),
        "max_depth": int(rng.integers(depth_low, depth_high + 1)),
        "feature_fraction": float(rng.uniform(*SEARCH_SPACE["feature_fraction"])),
        "bagging_fraction": float(rng.uniform(*SEARCH_SPACE["bagging_fraction"])),
        "is_unbalance": bool(rng.integers(0, 2)),
    }


def _metric_history(cv_result, metric):
    # lightgbm>=4 prefixes the keys with the dataset name
    for key in (f"valid {metric}-mean", f"{metric}-mean"):
        if key in cv_result:
            return cv_result[key]
    raise KeyError(f"No '{metric}-mean' entry in cv result: {sorted(cv_result)}")


def random_search(
    X,
    y,
    n_iter=N_SEARCH_ITER,
    nfold=CV_FOLDS,
    num_boost_round=NUM_BOOST_ROUND,
    early_stopping_rounds=EARLY_STOPPING_ROUNDS,
    seed=RANDOM_SEED,
    metric="auc",
    logger=None,  # optional CSVLogger
    verbose=1,
):
    """
    Cross-validate ``n_iter`` randomly sampled configurations.

    Args:
        X: Feature matrix
        y: Binary labels
        n_iter: Number of configurations to draw
        nfold: Number of stratified cross-validation folds
        num_boost_round: Upper bound on boosting iterations per fold
        early_stopping_rounds: Patience on the mean validation metric
        seed: Seed for both the sampler and LightGBM
        metric: LightGBM metric to maximise, one of MAXIMIZED_METRICS
        logger: Optional CSVLogger receiving one row per trial
        verbose: Show a progress bar when > 0

    Returns:
        DataFrame with one row per trial ordered by descending score.
    """
    if n_iter < 1:
        raise ValueError(f"n_iter must be at least 1, got {n_iter}")
    if metric not in MAXIMIZED_METRICS:
        raise ValueError(f"Unsupported metric: {metric}")

    rng = np.random.default_rng(seed)
    train_set = lgb.Dataset(X, label=y, free_raw_data=False)

    rows = []
    t0 = time.time()
    trials = range(n_iter)
    if verbose > 0:
        trials = tqdm(trials, desc="Random search", leave=True)
    for trial in trials:
        sampled = sample_hyperparameters(rng)
        params = default_params(metric=metric, seed=seed, **sampled)

        cv_result = lgb.cv(
            params,
            train_set,
            num_boost_round=num_boost_round,
            nfold=nfold,
            stratified=True,
            seed=seed,
            callbacks=[
                lgb.early_stopping(stopping_rounds=early_stopping_rounds, verbose=False)
            ],
        )
        history = _metric_history(cv_result, metric)
        best = int(np.argmax(history))
        row = {
            "trial": trial,
            **sampled,
            "score": float(history[best]),
            "best_iteration": best + 1,
        }
        rows.append(row)

        log.info(
            "Trial %d/%d %s=%.5f (%d rounds) %s",
            trial + 1,
            n_iter,
            metric,
            row["score"],
            row["best_iteration"],
            sampled,
        )
        if logger is not None:
            logger.log({**row, "elapsed": format_seconds(time.time() - t0)})
        if verbose > 0:
            trials.set_postfix({"best": f"{max(r['score'] for r in rows):.4f}"})

    results = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    return results.sort_values("score", ascending=False, kind="mergesort").reset_index(
        drop=True
    )


def best_params(results, **overrides):
    """LightGBM parameters of the top-ranked trial."""
    if results.empty:
        raise ValueError("No search results to pick from")
    top = results.iloc[0]
    sampled = {
        "learning_rate": float(top["learning_rate"]),
        "num_leaves": int(top["num_leaves"]),
        "max_depth": int(top["max_depth"]),
        "feature_fraction": float(top["feature_fraction"]),
        "bagging_fraction": float(top["bagging_fraction"]),
        "is_unbalance": bool(top["is_unbalance"]),
    }
    sampled.update(overrides)
    return default_params(**sampled)
