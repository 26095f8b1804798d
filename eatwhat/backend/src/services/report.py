from __future__ import annotations

from typing import List, Optional

from models import PreferenceProfile, RankedRestaurant, UserLocation
from services.preferences import preference_summary

KM_TO_MILES = 0.621371


def build_report(
    ranked: List[RankedRestaurant],
    *,
    preference: Optional[PreferenceProfile] = None,
    user_location: Optional[UserLocation] = None,
    top_n: int = 5,
) -> str:
    header = [
        "## Restaurant Recommendations",
        "",
    ]
    if user_location is not None:
        header.append(f"- Your location: {user_location.latitude:.5f}, {user_location.longitude:.5f}")
    else:
        header.append("- Your location: unknown (distances as supplied)")
    header.append(f"- Candidates ranked: {len(ranked)}")
    header.append("")

    if preference is not None:
        header.append("### Preferences")
        header.extend(f"- {line}" for line in preference_summary(preference).splitlines())
        header.append(f"- Confidence: {preference.confidence:.2f}")
        header.append("")

    lines = header
    lines.append("### Top Picks")
    if not ranked:
        lines.append("No restaurants matched. Try widening the search radius.")
        return "\n".join(lines)

    for idx, r in enumerate(ranked[: max(1, top_n)], start=1):
        p = r.place
        link = f"[View map]({p.location_url})" if p.location_url else "No map link"
        lines += [
            f"#### {idx}. {p.name}",
            f"- Address: {p.address or 'Not provided'}",
            f"- Score: {r.score:.2f}",
            f"- Rating: {f'{p.rating:.1f}/5' if p.rating else 'not rated'}",
            f"- Distance: {r.distance:.1f} km ({r.distance * KM_TO_MILES:.1f} miles)",
            f"- Map: {link}",
            ("- Why:\n" + "\n".join(f"  * {text}" for text in r.reasons)) if r.reasons else "- Why: no specific match yet",
            "",
        ]

    return "\n".join(lines)
