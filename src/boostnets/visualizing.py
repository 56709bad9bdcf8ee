"""
Animated view of how a network's weights move away from their initial values.

This module provides a Keras callback that renders one frame per epoch and
composes them into a GIF when training ends.
"""

import os
import numpy as np
import imageio.v2 as imageio

import matplotlib.pyplot as plt
import seaborn as sns
import tensorflow as tf


def flatten_weights(model) -> np.ndarray:
    """Return every kernel of `model` as one 1-D array."""
    flats = [
        tf.reshape(layer.kernel, [-1])
        for layer in model.layers
        if hasattr(layer, "kernel")
    ]
    if not flats:
        return np.zeros((0,), dtype="float32")
    return tf.concat(flats, axis=0).numpy()


class TrainingGifVisualizer(tf.keras.callbacks.Callback):
    """
    - Captures the initial weights (epoch 0) vs. current weights each epoch.
    - Writes per-epoch PNGs and composes them into a GIF at the end.

    Usage:
      viz = TrainingGifVisualizer(out_dir=..., tag="mnist_cnn")
      model.fit(..., callbacks=[viz])
      viz.gif_path  # written after training
    """

    def __init__(
        self,
        out_dir: str,
        tag: str = "training",
        framerate: int = 2,
        sample_size: int = 20000,
        cleanup_frames: bool = True,
    ):
        super().__init__()
        self.out_dir = out_dir
        os.makedirs(self.out_dir, exist_ok=True)
        self.tag = tag
        self.frames_dir = os.path.join(out_dir, f"{tag}_frames")
        os.makedirs(self.frames_dir, exist_ok=True)
        self.gif_path = os.path.join(out_dir, f"{tag}.gif")
        self.framerate = framerate
        self.sample_size = sample_size
        self.cleanup_frames = cleanup_frames
        self._w0 = None
        self._idx = None
        self.total_epochs = None

    def on_train_begin(self, logs=None):
        self.total_epochs = self.params.get("epochs") if self.params else None
        self._w0 = flatten_weights(self.model)
        # fixed subset so frames are comparable
        rng = np.random.RandomState(seed=12345)
        n = len(self._w0)
        self._idx = rng.choice(n, size=min(self.sample_size, n), replace=False)
        self._make_frame(epoch=0)

    def on_epoch_end(self, epoch, logs=None):
        logs = logs or {}
        self._make_frame(epoch=epoch + 1, val_acc=logs.get("val_accuracy"))

    def on_train_end(self, logs=None):
        self.write_gif()

    def write_gif(self) -> str:
        frames = []
        frame_paths = []
        for e in range(0, (self.total_epochs or 0) + 1):
            fp = os.path.join(self.frames_dir, f"frame_{e:03d}.png")
            if os.path.exists(fp):
                frames.append(imageio.imread(fp))
                frame_paths.append(fp)
        if frames:
            imageio.mimsave(
                self.gif_path, frames, duration=1.0 / max(1, self.framerate)
            )

            if self.cleanup_frames:
                for fp in frame_paths:
                    os.remove(fp)
                if not os.listdir(self.frames_dir):
                    os.rmdir(self.frames_dir)
        return self.gif_path

    def _make_frame(self, epoch: int, val_acc=None):
        if self._w0 is None or len(self._idx) == 0:
            return

        wT = flatten_weights(self.model)
        w0 = self._w0[self._idx]
        wT = wT[self._idx]

        sns.set_theme(style="whitegrid")
        g = sns.jointplot(
            x=w0,
            y=wT,
            height=6,
            kind="scatter",
            color="g",
            marker="o",
            joint_kws={"s": 6, "edgecolor": "w"},
            marginal_kws=dict(bins=100),
            ratio=4,
        )
        g.set_axis_labels("Initial", "Current")

        title = f"Epoch: {epoch} /{self.total_epochs or 0}"
        if val_acc is not None:
            title += f"\nValidation accuracy: {val_acc:.4f}"

        g.figure.text(
            0.98,
            0.98,
            title,
            transform=g.figure.transFigure,
            fontsize=11,
            ha="right",
            va="top",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.8, edgecolor="gray"),
        )

        fn = os.path.join(self.frames_dir, f"frame_{epoch:03d}.png")
        g.figure.savefig(fn, dpi=80)  # fixed size, GIF frames must match
        plt.close(g.figure)
