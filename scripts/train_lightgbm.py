from argparse import ArgumentParser
import os

import matplotlib

matplotlib.use("Agg")  # headless runs, figures only go to files

from boostnets import (
    Metrics,
    binary_report,
    default_params,
    load_creditcard_data,
    predict_proba,
    print_confusion_matrix,
    setup_log,
    split_creditcard_data,
    train_lightgbm,
)
from boostnets.config import (
    CREDITCARD_CSV,
    EARLY_STOPPING_ROUNDS,
    NUM_BOOST_ROUND,
    RANDOM_SEED,
)


def parse_args():
    ap = ArgumentParser()
    ap.add_argument("--csv", type=str, default=CREDITCARD_CSV, help="Path to creditcard.csv")
    ap.add_argument("--learning-rate", type=float, default=0.05)
    ap.add_argument("--num-leaves", type=int, default=31)
    ap.add_argument("--max-depth", type=int, default=-1)
    ap.add_argument("--feature-fraction", type=float, default=0.9)
    ap.add_argument("--bagging-fraction", type=float, default=0.8)
    ap.add_argument(
        "--is-unbalance", action="store_true", help="Reweight the rare fraud class"
    )
    ap.add_argument("--num-boost-round", type=int, default=NUM_BOOST_ROUND)
    ap.add_argument("--early-stopping-rounds", type=int, default=EARLY_STOPPING_ROUNDS)
    ap.add_argument("--threshold", type=float, default=0.5)
    ap.add_argument("--seed", type=int, default=RANDOM_SEED)
    ap.add_argument("--save-dir", type=str, required=False, default=None)
    return ap.parse_args()


def main():
    args = parse_args()
    setup_log(args.save_dir)

    X, y = load_creditcard_data(args.csv)
    train, valid, test = split_creditcard_data(X, y, seed=args.seed)
    print(f"Loaded {len(X)} transactions, {int(y.sum())} frauds")

    params = default_params(
        learning_rate=args.learning_rate,
        num_leaves=args.num_leaves,
        max_depth=args.max_depth,
        feature_fraction=args.feature_fraction,
        bagging_fraction=args.bagging_fraction,
        is_unbalance=args.is_unbalance,
        seed=args.seed,
    )
    booster = train_lightgbm(
        train,
        valid,
        params,
        num_boost_round=args.num_boost_round,
        early_stopping_rounds=args.early_stopping_rounds,
    )

    X_test, y_test = test
    y_score = predict_proba(booster, X_test)
    report = binary_report(y_test, y_score, threshold=args.threshold)
    cm = print_confusion_matrix(y_test, (y_score >= args.threshold).astype(int), labels=[0, 1])
    print(f"Best iteration: {booster.best_iteration}")
    print(f"Test AUC: {report['auc']:.4f}")
    print(f"Precision: {report['precision']:.4f}  Recall: {report['recall']:.4f}")

    if args.save_dir:
        booster.save_model(os.path.join(args.save_dir, "lightgbm.txt"))
        metrics = Metrics(vars(args))
        metrics.store_summary_metrics(best_iteration=booster.best_iteration, **report)
        metrics.add_roc(y_test, y_score)
        metrics.add_confusion_matrix(cm)
        metrics.store(args.save_dir)


if __name__ == "__main__":
    main()
