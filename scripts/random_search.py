import argparse
import json
import time
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # headless runs, figures only go to files

from boostnets import (
    CSVLogger,
    Metrics,
    best_params,
    binary_report,
    load_creditcard_data,
    predict_proba,
    random_search,
    setup_log,
    split_creditcard_data,
    train_lightgbm,
)
from boostnets.config import (
    CREDITCARD_CSV,
    CV_FOLDS,
    EARLY_STOPPING_ROUNDS,
    N_SEARCH_ITER,
    NUM_BOOST_ROUND,
    RANDOM_SEED,
)
from boostnets.random_search import RESULT_COLUMNS


def _now_tag() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


def parse_args():
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(
        description="Random hyper-parameter search for the LightGBM fraud model"
    )
    ap.add_argument("--csv", type=str, default=CREDITCARD_CSV, help="Path to creditcard.csv")
    ap.add_argument("--n-iter", type=int, default=N_SEARCH_ITER, help="Number of sampled configurations")
    ap.add_argument("--nfold", type=int, default=CV_FOLDS)
    ap.add_argument("--num-boost-round", type=int, default=NUM_BOOST_ROUND)
    ap.add_argument("--early-stopping-rounds", type=int, default=EARLY_STOPPING_ROUNDS)
    ap.add_argument("--save-dir", type=str, required=False, default="runs/random_search")
    ap.add_argument(
        "--train-best",
        action="store_true",
        help="Train and evaluate a final model with the best configuration",
    )
    ap.add_argument(
        "--seed", type=int, default=RANDOM_SEED, help="Random seed for reproducibility"
    )
    return ap.parse_args()


def main():
    args = parse_args()
    save_dir = Path(args.save_dir)
    save_dir.mkdir(parents=True, exist_ok=True)
    setup_log(str(save_dir))

    X, y = load_creditcard_data(args.csv)
    train, valid, test = split_creditcard_data(X, y, seed=args.seed)

    tag = _now_tag()
    logger = CSVLogger(str(save_dir / f"trials_{tag}.csv"), RESULT_COLUMNS + ["elapsed"])

    print(f"Starting random search with {args.n_iter} draws...")
    results = random_search(
        *train,
        n_iter=args.n_iter,
        nfold=args.nfold,
        num_boost_round=args.num_boost_round,
        early_stopping_rounds=args.early_stopping_rounds,
        seed=args.seed,
        logger=logger,
    )

    print("\n=== Ranked configurations ===")
    print(results.to_string(index=False))

    results.to_csv(save_dir / f"ranked_{tag}.csv", index=False)
    params = best_params(results, seed=args.seed)
    with open(save_dir / f"best_params_{tag}.json", "w") as f:
        json.dump(
            {
                "n_iter": args.n_iter,
                "nfold": args.nfold,
                "best_score": float(results.loc[0, "score"]),
                "params": params,
            },
            f,
            indent=2,
        )

    metrics = Metrics(vars(args))
    metrics.add_search_results(results)

    if args.train_best:
        booster = train_lightgbm(
            train,
            valid,
            params,
            num_boost_round=args.num_boost_round,
            early_stopping_rounds=args.early_stopping_rounds,
        )
        y_score = predict_proba(booster, test[0])
        report = binary_report(test[1], y_score)
        print(f"\nTest AUC with best configuration: {report['auc']:.4f}")
        metrics.store_summary_metrics(best_iteration=booster.best_iteration, **report)
        metrics.add_roc(test[1], y_score)
        booster.save_model(str(save_dir / f"lightgbm_best_{tag}.txt"))

    metrics.store(str(save_dir / tag))
    print(f"\nResults directory: {save_dir}")


if __name__ == "__main__":
    main()
