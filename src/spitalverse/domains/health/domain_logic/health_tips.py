"""Local health-tips bundle used when the external LLM is unavailable.

Tip order is significant: the abnormal-values tip (if any) comes first,
then the medication tip (if any), then the five base tips. Focus areas
follow the same precedence and are capped at three.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

MAX_TIPS = 6
MAX_FOCUS_AREAS = 3


@dataclass(frozen=True)
class HealthTip:
    id: str
    title: str
    content: str
    category: str  # nutrition | exercise | sleep | stress | medication | prevention
    priority: str  # high | medium | low


@dataclass(frozen=True)
class DailyTip:
    title: str
    content: str
    category: str


@dataclass
class HealthTipsBundle:
    daily_tip: DailyTip
    tips: list[HealthTip]
    focus_areas: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "dailyTip": asdict(self.daily_tip),
            "tips": [asdict(t) for t in self.tips],
            "focusAreas": list(self.focus_areas),
        }


BASE_TIPS: tuple[HealthTip, ...] = (
    HealthTip(
        id="hydration-1",
        title="Stay Hydrated",
        content=(
            "Aim to drink 8-10 glasses of water daily. Proper hydration supports every "
            "bodily function, from digestion to brain performance."
        ),
        category="nutrition",
        priority="high",
    ),
    HealthTip(
        id="sleep-1",
        title="Prioritize Quality Sleep",
        content=(
            "Establish a consistent sleep schedule by going to bed and waking up at the "
            "same time each day, even on weekends."
        ),
        category="sleep",
        priority="high",
    ),
    HealthTip(
        id="exercise-1",
        title="Move Your Body Daily",
        content=(
            "Aim for at least 30 minutes of moderate activity most days. Even a brisk "
            "walk counts toward your daily movement goals."
        ),
        category="exercise",
        priority="medium",
    ),
    HealthTip(
        id="stress-1",
        title="Practice Mindful Breathing",
        content=(
            "Take 5 minutes each day to practice deep breathing. Inhale for 4 counts, "
            "hold for 4, exhale for 4. This activates your relaxation response."
        ),
        category="stress",
        priority="medium",
    ),
    HealthTip(
        id="prevention-1",
        title="Schedule Regular Check-ups",
        content=(
            "Stay proactive with your health by scheduling regular check-ups and "
            "screenings appropriate for your age and health history."
        ),
        category="prevention",
        priority="medium",
    ),
)

ABNORMAL_VALUES_TIP = HealthTip(
    id="prevention-2",
    title="Monitor Your Health Trends",
    content=(
        "Some of your lab values are outside normal range. Keep tracking them and "
        "discuss trends with your healthcare provider at your next visit."
    ),
    category="prevention",
    priority="high",
)

DAILY_TIP = DailyTip(
    title="Start Your Day with Purpose",
    content=(
        "Begin each morning with a glass of water and a moment of gratitude. Hydration "
        "kickstarts your metabolism and a positive mindset sets the tone for the day."
    ),
    category="nutrition",
)


def medication_tip(medication_count: int) -> HealthTip:
    return HealthTip(
        id="medication-1",
        title="Medication Adherence",
        content=(
            f"You have {medication_count} active medication(s). Set daily reminders to "
            "take your medications at the same time each day for best results."
        ),
        category="medication",
        priority="high",
    )


def generate_fallback_tips(medication_count: int, has_abnormal_values: bool) -> HealthTipsBundle:
    """Build the tips bundle from the number of active medications and lab status."""
    tips = list(BASE_TIPS)
    if medication_count > 0:
        tips.insert(0, medication_tip(medication_count))
    if has_abnormal_values:
        tips.insert(0, ABNORMAL_VALUES_TIP)

    focus_areas = ["General Wellness", "Preventive Care"]
    if medication_count > 0:
        focus_areas.append("Medication Management")
    if has_abnormal_values:
        focus_areas.append("Health Monitoring")

    return HealthTipsBundle(
        daily_tip=DAILY_TIP,
        tips=tips[:MAX_TIPS],
        focus_areas=focus_areas[:MAX_FOCUS_AREAS],
    )
