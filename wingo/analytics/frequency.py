from typing import Sequence

from wingo.core.records import BIG, SMALL, ModelVote, OutcomeRecord

WINDOWS = (10, 20, 30)


def predict_frequency(records: Sequence[OutcomeRecord], windows: Sequence[int] = WINDOWS) -> ModelVote:
    """Short-window BIG ratios, each weighted by 1/window."""
    big_score = small_score = 0.0
    used = 0
    for w in windows:
        if len(records) < w:
            continue
        big = sum(1 for r in records[:w] if r.label == BIG)
        conf = abs(big / w - 0.5) * 2
        if big >= w / 2:
            big_score += conf / w
        else:
            small_score += conf / w
        used += 1
    if not used:
        return ModelVote(BIG, 0.50, 'frequency_insufficient')

    total = big_score + small_score
    final = max(big_score, small_score) / total if total > 0 else 0.5
    return ModelVote(
        BIG if big_score > small_score else SMALL,
        min(final + 0.05, 0.75),
        'frequency',
    )
