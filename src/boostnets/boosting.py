"""
LightGBM training for the credit-card fraud table.
"""

import logging

import lightgbm as lgb

from .config import RANDOM_SEED, NUM_BOOST_ROUND, EARLY_STOPPING_ROUNDS

log = logging.getLogger(__name__)

DEFAULT_PARAMS = {
    "objective": "binary",
    "metric": "auc",
    "boosting_type": "gbdt",
    "learning_rate": 0.05,
    "num_leaves": 31,
    "max_depth": -1,
    "min_child_samples": 20,
    # feature / row sampling
    "feature_fraction": 0.9,
    "bagging_fraction": 0.8,
    "bagging_freq": 5,
    # class imbalance
    "is_unbalance": False,
    "seed": RANDOM_SEED,
    "verbosity": -1,
}


def default_params(**overrides):
    params = dict(DEFAULT_PARAMS)
    params.update(overrides)
    return params


def train_lightgbm(
    train,
    valid,
    params=None,
    num_boost_round=NUM_BOOST_ROUND,
    early_stopping_rounds=EARLY_STOPPING_ROUNDS,
    log_every=100,
    evals_result=None,
):
    """
    Train a booster with early stopping on the validation set.

    Args:
        train: Tuple of (X_train, y_train)
        valid: Tuple of (X_valid, y_valid) monitored for early stopping
        params: LightGBM parameters, defaults to ``default_params()``
        num_boost_round: Upper bound on boosting iterations
        early_stopping_rounds: Patience in iterations on the validation metric
        log_every: Period of evaluation messages, 0 to silence them
        evals_result: Optional dict filled with per-iteration metric values

    Returns:
        The trained ``lgb.Booster``; ``best_iteration`` is set by LightGBM.
    """
    params = default_params() if params is None else params
    X_train, y_train = train
    X_valid, y_valid = valid

    train_set = lgb.Dataset(X_train, label=y_train)
    valid_set = lgb.Dataset(X_valid, label=y_valid, reference=train_set)

    callbacks = [lgb.early_stopping(stopping_rounds=early_stopping_rounds, verbose=False)]
    if log_every:
        callbacks.append(lgb.log_evaluation(period=log_every))
    if evals_result is not None:
        callbacks.append(lgb.record_evaluation(evals_result))

    booster = lgb.train(
        params,
        train_set,
        num_boost_round=num_boost_round,
        valid_sets=[train_set, valid_set],
        valid_names=["train", "valid"],
        callbacks=callbacks,
    )
    log.info(
        "Best iteration %d, valid %s",
        booster.best_iteration,
        dict(booster.best_score.get("valid", {})),
    )
    return booster


def predict_proba(booster, X):
    """Fraud probabilities at the booster's best iteration."""
    return booster.predict(X, num_iteration=booster.best_iteration or None)
