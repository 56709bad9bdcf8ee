from .mlp import mlp
from .cnn import mnist_cnn, cifar10_cnn
