# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: hydrogen
#       format_version: '1.3'
#       jupytext_version: 1.16.4
#   kernelspec:
#     display_name: Python 3
#     language: python
#     name: python3
# ---

# %% [markdown]
# # Gradient boosted trees on the credit-card fraud table
#
# The dataset holds two days of European card transactions; 492 of the
# 284,807 rows are frauds. The features `V1`..`V28` are PCA components, so
# there is little feature engineering left to do. What makes the problem
# interesting is the class imbalance: a model that never predicts fraud is
# already 99.8% accurate, so we look at the AUC and the confusion matrix
# instead of the accuracy.
#
# * **PART 1:** Train a LightGBM model with early stopping
#
# * **PART 2:** Random hyper-parameter search with cross-validation
#
# Download `creditcard.csv` from Kaggle and put it under `data/` (or point
# `BOOSTNETS_CREDITCARD_CSV` at it).

# %%
import numpy as np
import matplotlib.pyplot as plt

from boostnets import (
    binary_report,
    default_params,
    load_creditcard_data,
    plot_roc,
    plot_search_results,
    predict_proba,
    print_confusion_matrix,
    random_search,
    best_params,
    setup_log,
    split_creditcard_data,
    train_lightgbm,
)
from boostnets.config import CREDITCARD_CSV

setup_log()

# %% [markdown]
# ## PART 1: Training with early stopping
#
# We keep 20% of the rows as a test set and split a validation set off the
# rest. Both splits are stratified so every part sees frauds.

# %%
X, y = load_creditcard_data(CREDITCARD_CSV)
train, valid, test = split_creditcard_data(X, y)

for name, (_, labels) in zip(["train", "valid", "test"], [train, valid, test]):
    print(f"{name:>5}: {len(labels):>7} rows, {int(labels.sum()):>4} frauds")

# %% [markdown]
# LightGBM grows trees until the validation AUC has not improved for 50
# rounds and then keeps the best iteration.

# %%
evals = {}
params = default_params(learning_rate=0.05, num_leaves=31, is_unbalance=False)
booster = train_lightgbm(train, valid, params, evals_result=evals)

plt.plot(evals["train"]["auc"], label="train")
plt.plot(evals["valid"]["auc"], label="valid")
plt.xlabel("Boosting round")
plt.ylabel("AUC")
plt.legend()
plt.show()
plt.close()

# %%
X_test, y_test = test
y_score = predict_proba(booster, X_test)
report = binary_report(y_test, y_score)
print_confusion_matrix(y_test, (y_score >= 0.5).astype(int), labels=[0, 1])
print(f"Test AUC: {report['auc']:.4f}")

fig = plot_roc(y_test, y_score)
plt.show()
plt.close(fig)

# %% [markdown]
# ## PART 2: Random search
#
# Instead of guessing the parameters we draw 20 configurations: the
# learning rate on a log scale, leaf count and depth uniformly, the feature
# and bagging fractions in [0.5, 1] and a coin flip for `is_unbalance`.
# Each draw is scored with 5-fold cross-validation on the training set.

# %%
results = random_search(*train, n_iter=20)
results.head(10)

# %%
fig = plot_search_results(results)
plt.show()
plt.close(fig)

# %% [markdown]
# Finally we retrain with the best configuration and check it on the test
# set, which the search has never seen.

# %%
booster = train_lightgbm(train, valid, best_params(results))
y_score = predict_proba(booster, X_test)
print_confusion_matrix(y_test, (y_score >= 0.5).astype(int), labels=[0, 1])
print(f"Test AUC with best configuration: {binary_report(y_test, y_score)['auc']:.4f}")
print(f"Fraction of frauds caught: {np.mean(y_score[y_test.values == 1] >= 0.5):.3f}")
