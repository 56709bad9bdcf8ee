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
# # Small neural networks with Keras
#
# * **PART 1:** A multilayer perceptron on MNIST
#
# * **PART 2:** A convolutional network on MNIST
#
# * **PART 3:** A convolutional network on CIFAR-10
#
# Both datasets are downloaded by Keras on first use.

# %%
import numpy as np
import matplotlib.pyplot as plt

from boostnets import (
    cifar10_cnn,
    count_params,
    evaluate,
    get_cifar10_data,
    get_mnist_data,
    mlp,
    mnist_cnn,
    plot_history,
    print_confusion_matrix,
    setup_log,
    train_network,
)

setup_log()

# %% [markdown]
# ## PART 1: Multilayer perceptron
#
# The perceptron sees every image as a flat vector of 784 pixels scaled to
# [0, 1]. Two hidden layers of 512 units with dropout are plenty.

# %%
(x_train, y_train), (x_test, y_test) = get_mnist_data(flatten=True)
model = mlp(num_classes=10)
print(f"{count_params(model)} trainable parameters")

model, history = train_network(
    model, (x_train, y_train), epochs=20, learning_rate=1e-3, validation_split=0.1
)
fig = plot_history(history)
plt.show()
plt.close(fig)

loss, acc = evaluate(model, (x_test, y_test))
print(f"Test loss: {loss:.4f}, test accuracy: {acc:.4f}")

# %% [markdown]
# ## PART 2: Convolutional network on MNIST
#
# Keeping the images two dimensional lets the network share weights across
# positions. We also let Keras stop early once the validation loss stalls.

# %%
(x_train, y_train), (x_test, y_test) = get_mnist_data()
model = mnist_cnn(num_classes=10)
print(f"{count_params(model)} trainable parameters")

model, history = train_network(
    model,
    (x_train, y_train),
    epochs=12,
    learning_rate=1e-3,
    validation_split=0.1,
    early_stopping_patience=3,
)
fig = plot_history(history)
plt.show()
plt.close(fig)

y_pred = np.argmax(model.predict(x_test, verbose=0), axis=1)
print_confusion_matrix(np.argmax(y_test, axis=1), y_pred, labels=list(range(10)))

# %% [markdown]
# ## PART 3: Convolutional network on CIFAR-10
#
# Colour images of ten object classes are a lot harder. Expect roughly 75%
# test accuracy after 30 epochs.

# %%
(x_train, y_train), (x_test, y_test) = get_cifar10_data()
model = cifar10_cnn(num_classes=10)

model, history = train_network(
    model,
    (x_train, y_train),
    epochs=30,
    learning_rate=1e-3,
    batch_size=64,
    validation_data=(x_test, y_test),
    early_stopping_patience=5,
)
fig = plot_history(history)
plt.show()
plt.close(fig)

loss, acc = evaluate(model, (x_test, y_test))
print(f"Test loss: {loss:.4f}, test accuracy: {acc:.4f}")
