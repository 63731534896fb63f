import os
import numpy as np
import matplotlib.pyplot as plt

def plot_solve_history(logs, outpath):
    outdir = os.path.dirname(outpath)
    if outdir:
        os.makedirs(outdir, exist_ok=True)

    k = logs["cycle"]
    ok = np.asarray(logs["ok"], dtype=bool)

    fig = plt.figure(figsize=(10, 7))

    ax1 = plt.subplot(3, 1, 1)
    ax1.plot(k, logs["iter"], marker=".", label="osqp iter")
    ax1.plot(k[~ok], np.asarray(logs["iter"])[~ok], "x", label="failed")
    ax1.legend()
    ax1.set_ylabel("iterations")

    ax2 = plt.subplot(3, 1, 2)
    ax2.plot(k, logs["fit_rmse"], label="fit rmse")
    ax2.legend()
    ax2.set_ylabel("rmse")

    ax3 = plt.subplot(3, 1, 3)
    ax3.step(k, logs["num_param"], where="post", label="params")
    ax3.step(k, logs["num_constraint"], where="post", label="constraints")
    ax3.legend()
    ax3.set_ylabel("size")
    ax3.set_xlabel("cycle")

    fig.tight_layout()
    fig.savefig(outpath, dpi=160)
    plt.close(fig)
