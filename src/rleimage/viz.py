from __future__ import annotations
from .models.image import RLEImage

def plot_image(image: RLEImage, *, show: bool = True):
    """Minimal imshow of a 2-D run-length image with run starts marked, for sanity-checking."""
    import matplotlib.pyplot as plt
    if image.dimension != 2:
        raise ValueError(f"plot_image needs a 2-D image, got shape {image.shape}")
    fig, ax = plt.subplots()
    ax.imshow(image.to_array(dtype=float), interpolation="nearest", cmap="gray")
    xs, ys = [], []
    for row, runs in enumerate(image.lines):
        col = 0
        for r in runs:
            xs.append(col - 0.5)
            ys.append(row)
            col += r.length
    ax.scatter(xs, ys, s=8, marker="|", c="red")
    ax.set_xlabel("Column")
    ax.set_ylabel("Line")
    ax.set_title(f"RLE image {image.shape}, {image.total_runs} runs")
    if show:
        plt.show()
    return fig
