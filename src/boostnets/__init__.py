from .boosting import default_params, train_lightgbm, predict_proba
from .random_search import random_search, sample_hyperparameters, best_params
from .networks import train_network, evaluate
from .data import (
    load_creditcard_data,
    split_creditcard_data,
    get_mnist_data,
    get_cifar10_data,
    make_loaders,
)
from .models import mlp, mnist_cnn, cifar10_cnn
from .metrics import (
    Metrics,
    binary_report,
    confusion_matrix_report,
    print_confusion_matrix,
    plot_history,
    plot_roc,
    plot_search_results,
)
from .csv_logger import CSVLogger, KerasCSVLogger, format_seconds
from .visualizing import TrainingGifVisualizer
from .util import setup_log, get_experiment, count_params
