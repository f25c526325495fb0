import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def plot_series(df, outpath, title):
    """Revenue and expense bars per bucket with net profit as a line."""
    frame = df.set_index("Bucket")
    ax = frame[["Revenue", "Expenses"]].fillna(0).plot(kind="bar")
    frame["Net_Profit"].plot(ax=ax, color="black", marker="o", use_index=False)
    ax.axhline(0, color="grey", linewidth=0.8)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
