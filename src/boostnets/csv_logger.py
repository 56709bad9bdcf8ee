from typing import List, Dict, Any
import os
import time

import tensorflow as tf


class CSVLogger:
    """
    Append-only CSV log of training epochs or search trials.
    """

    def __init__(self, path: str, header: List[str]):
        self.path = path
        self.header = list(header)
        if not os.path.exists(self.path):
            with open(self.path, "w") as f:
                f.write(",".join(self.header) + "\n")

    def log(self, row: Dict[str, Any]):
        vals = [row.get(k, "") for k in self.header]
        with open(self.path, "a") as f:
            f.write(",".join(str(v) for v in vals) + "\n")


class KerasCSVLogger(tf.keras.callbacks.Callback):
    """Forward each epoch's Keras logs to a CSVLogger."""

    def __init__(self, logger: CSVLogger, phase: str = "train"):
        super().__init__()
        self.logger = logger
        self.phase = phase
        self._t0 = None

    def on_train_begin(self, logs=None):
        self._t0 = time.time()

    def on_epoch_end(self, epoch, logs=None):
        row = {"phase": self.phase, "epoch": epoch + 1}
        for key, value in (logs or {}).items():
            row[key] = f"{float(value):.4f}"
        row["elapsed"] = format_seconds(time.time() - (self._t0 or time.time()))
        self.logger.log(row)


def format_seconds(s: float) -> str:
    """
    Format seconds into human-readable format.
    """
    m, s = divmod(int(s), 60)
    h, m = divmod(m, 60)
    if h:
        return f"{h}h{m:02d}m{s:02d}s"
    if m:
        return f"{m}m{s:02d}s"
    return f"{s}s"
