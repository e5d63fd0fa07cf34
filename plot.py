import sys
from pathlib import Path

import matplotlib.pyplot as plt

SRC = Path(__file__).parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from crush.utils.cascade_stats import simulate_turns  # noqa: E402

stats = simulate_turns(2000, seed=7)
histogram = stats.depth_histogram()

fig, (ax_depth, ax_score) = plt.subplots(1, 2, figsize=(10, 4))
ax_depth.bar(range(len(histogram)), histogram)
ax_depth.set_xlabel("Cascade steps per turn")
ax_depth.set_ylabel("Turns")
ax_depth.set_title("Cascade depth")

ax_score.hist(stats.scores, bins=30)
ax_score.axvline(stats.mean_score(), color="gray", linestyle="--", label=f"mean {stats.mean_score():.1f}")
ax_score.set_xlabel("Score per turn")
ax_score.set_title(f"Combo bonus share {stats.combo_bonus_share():.1%}")
ax_score.legend()
plt.tight_layout()
plt.show()
