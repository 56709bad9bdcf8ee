"""
Default settings shared by the training drivers and walkthroughs.
"""

import os

RANDOM_SEED = 42

# credit-card fraud table
CREDITCARD_CSV = os.environ.get("BOOSTNETS_CREDITCARD_CSV", "data/creditcard.csv")
TEST_SIZE = 0.2  # held-out test fraction
VALID_SIZE = 0.2  # validation fraction of what remains

# LightGBM
NUM_BOOST_ROUND = 1000
EARLY_STOPPING_ROUNDS = 50
CV_FOLDS = 5
N_SEARCH_ITER = 20

# Keras
BATCH_SIZE = 128
EPOCHS = 10
LEARNING_RATE = 1e-3
