from tensorflow.keras.models import Sequential
from tensorflow.keras.layers import Dense, Dropout, Input


def mlp(num_classes=10, input_shape=(784,), hidden_units=(512, 512), dropout=0.2):
    layers = [Input(shape=input_shape)]
    for units in hidden_units:
        layers.append(Dense(units, activation="relu"))
        if dropout:
            layers.append(Dropout(dropout))
    layers.append(Dense(num_classes, activation="softmax"))
    return Sequential(layers)
