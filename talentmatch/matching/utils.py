"""Helpers for handing match results to downstream consumers.

The payload produced here is the output record the UI layer renders.
"""

from typing import Any, Dict, Optional

from .models import MatchedKeyword, MatchResult


def build_keyword_payload(keyword: MatchedKeyword) -> Dict[str, Any]:
    return {
        "keyword_id": keyword.keyword_id,
        "text": keyword.text,
        "category": keyword.category,
        "tier": keyword.tier.label,
    }


def build_match_payload(
    match_result: MatchResult, eligibility_tier: Optional[str] = None
) -> Dict[str, Any]:
    """Build the output record for one ranked counterparty.

    Args:
        match_result: Scored pair
        eligibility_tier: Tier label assigned by the ranking stage

    Returns:
        Dict with keys:
        - counterparty_id: Id of the matched party
        - match_rate: Integer score in [0, 100]
        - meets_all_required: Whether every required keyword is held
        - eligibility_tier: fast-track / qualified / partial / none (or None)
        - matched_keywords: List of {keyword_id, text, category, tier}
        - missing_required: Required keywords not held, as {keyword_id, text, category}
        - matched_required_count / total_required_count
        - matched_preferred_count / total_preferred_count
        - profile: Counterparty display fields (None if not supplied)
    """
    profile = match_result.profile
    return {
        "counterparty_id": match_result.counterparty_id,
        "match_rate": match_result.match_rate,
        "meets_all_required": match_result.meets_all_required,
        "eligibility_tier": eligibility_tier,
        "matched_keywords": [build_keyword_payload(k) for k in match_result.matched_keywords],
        "missing_required": [
            {"keyword_id": k.keyword_id, "text": k.text, "category": k.category}
            for k in match_result.missing_keywords
        ],
        "matched_required_count": match_result.matched_required_count,
        "total_required_count": match_result.total_required_count,
        "matched_preferred_count": match_result.matched_preferred_count,
        "total_preferred_count": match_result.total_preferred_count,
        "profile": profile.model_dump(mode="json") if profile is not None else None,
    }


def build_rationale_dict(match_result: MatchResult) -> Dict[str, Any]:
    """Build a lightweight explanation of a score, suitable for logs.

    Returns:
        Dict with the raw and rounded rate, gate outcome and the ids behind
        each count
    """
    return {
        "counterparty_id": match_result.counterparty_id,
        "match_rate": match_result.match_rate,
        "raw_rate": round(match_result.raw_rate, 4),
        "meets_all_required": match_result.meets_all_required,
        "matched_required": sorted(match_result.matched_required_ids),
        "missing_required": sorted(match_result.missing_required_ids),
        "matched_preferred": sorted(match_result.matched_preferred_ids),
        "required_total": match_result.total_required_count,
        "preferred_total": match_result.total_preferred_count,
    }
