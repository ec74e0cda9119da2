from __future__ import annotations

from collections.abc import Iterable, Sequence

from .config import DEFAULT_SCORING_CONFIG, ImageScoringConfig
from .models import Candidate


def _is_denied(image_url: str, denylist: Iterable[str]) -> bool:
    return any(entry and entry in image_url for entry in denylist)


def score_image_candidate(
    candidate: Candidate,
    config: ImageScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Compute the heuristic "hero image" score for a single candidate.

    Higher is better. Unknown dimensions earn no resolution or ratio bonus
    and trigger no size penalty.
    """
    width, height = candidate.width, candidate.height
    known = width > 0 and height > 0

    area = width * height if known else 0
    score = min(area / config.resolution_divisor, config.resolution_cap)

    ratio = width / height if known else 0.0
    ratio_diff = abs(ratio - config.ratio_target) if ratio > 0 else config.unknown_ratio_diff

    if config.landscape_min < ratio < config.landscape_max:
        score += config.landscape_bonus

    if ratio_diff < config.close_ratio_diff:
        score += config.close_ratio_bonus
    elif ratio_diff < config.near_ratio_diff:
        score += config.near_ratio_bonus

    if known:
        if width < config.small_width or height < config.small_height:
            score -= config.small_penalty
        if width < config.tiny_width or height < config.tiny_height:
            score -= config.tiny_penalty

    if (candidate.image_url or "").lower().startswith("https://"):
        score += config.https_bonus

    return score


def rank_image_candidates(
    candidates: Sequence[Candidate],
    denylist: Iterable[str] = (),
    config: ImageScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[tuple[Candidate, float]]:
    """Return ``(candidate, score)`` pairs, best first.

    Candidates without an image URL are dropped. Denylisted domains are
    excluded unless every remaining candidate is denylisted, in which case
    the full set is ranked instead. Ties keep their input order.
    """
    # A bare string is one domain, not a sequence of characters
    denylist = (denylist,) if isinstance(denylist, str) else tuple(denylist)
    with_image = [c for c in candidates if c.image_url]
    safe = [c for c in with_image if not _is_denied(c.image_url or "", denylist)]
    pool = safe or with_image

    scored = [(c, score_image_candidate(c, config)) for c in pool]
    # sorted() is stable under reverse=True, so equal scores keep input order
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def pick_best_image_candidate(
    candidates: Sequence[Candidate],
    denylist: Iterable[str] = (),
    config: ImageScoringConfig = DEFAULT_SCORING_CONFIG,
) -> Candidate | None:
    ranked = rank_image_candidates(candidates, denylist, config)
    if not ranked:
        return None
    return ranked[0][0]
