from tensorflow.keras.models import Sequential
from tensorflow.keras.layers import (
    Conv2D,
    Dense,
    Dropout,
    Flatten,
    Input,
    MaxPooling2D,
)


def mnist_cnn(num_classes=10, dropout=0.25):
    model = Sequential(
        [
            Input(shape=(28, 28, 1)),
            Conv2D(32, kernel_size=3, activation="relu"),
            MaxPooling2D(pool_size=2),
            Conv2D(64, kernel_size=3, activation="relu"),
            MaxPooling2D(pool_size=2),
            Dropout(dropout),
            Flatten(),
            Dense(128, activation="relu"),
            Dropout(2 * dropout),
            Dense(num_classes, activation="softmax"),
        ]
    )
    return model


def cifar10_cnn(num_classes=10, dropout=0.25):
    model = Sequential(
        [
            Input(shape=(32, 32, 3)),
            Conv2D(32, kernel_size=3, padding="same", activation="relu"),
            Conv2D(32, kernel_size=3, activation="relu"),
            MaxPooling2D(pool_size=2),
            Dropout(dropout),
            Conv2D(64, kernel_size=3, padding="same", activation="relu"),
            Conv2D(64, kernel_size=3, activation="relu"),
            MaxPooling2D(pool_size=2),
            Dropout(dropout),
            Flatten(),
            Dense(512, activation="relu"),
            Dropout(2 * dropout),
            Dense(num_classes, activation="softmax"),
        ]
    )
    return model
