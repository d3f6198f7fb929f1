"""
Insight Generation.

Pure rules that turn a session snapshot into an ordered list of
observations. Rules run in a fixed order and each contributes at most
one insight; an empty session short-circuits to a single placeholder.
"""

from typing import List, Optional, Sequence

from ..emotion.base import NEGATIVE_EMOTIONS, POSITIVE_EMOTIONS, Emotion
from .base import EmotionShare, Insight, InsightKind, SessionSnapshot, emotion_percentages

HIGH_VARIABILITY_RATE = 2.0      # changes per minute
STABLE_RATE = 0.5                # changes per minute
STABLE_MIN_MINUTES = 2.0
EXTENDED_SESSION_MINUTES = 10.0
LOW_HAPPINESS_PERCENT = 30.0


NO_DATA_INSIGHT = Insight(
    kind=InsightKind.NEUTRAL,
    title="No Data Yet",
    description="Start analyzing to see insights about your emotional state.",
    recommendation="Begin emotion analysis to track your emotional patterns.",
)


def dominant_emotion(shares: Sequence[EmotionShare]) -> Optional[EmotionShare]:
    """Highest share; on a tie the emotion seen first in the session wins."""
    top: Optional[EmotionShare] = None
    for share in shares:
        if top is None or share.percentage > top.percentage:
            top = share
    return top


def _classify_dominant(top: EmotionShare) -> Insight:
    percent = f"{top.percentage:.1f}"
    name = top.emotion.value

    if top.emotion in POSITIVE_EMOTIONS:
        return Insight(
            kind=InsightKind.POSITIVE,
            title="Positive Emotional State",
            description=f"You've shown {name} emotions {percent}% of the time.",
            recommendation=(
                "Great! Keep engaging in activities that bring you joy "
                "and maintain this positive energy."
            ),
        )

    if top.emotion in NEGATIVE_EMOTIONS:
        return Insight(
            kind=InsightKind.CONCERN,
            title="Elevated Stress Indicators",
            description=f"{name} emotions dominated {percent}% of your session.",
            recommendation=(
                "Consider taking deep breaths, practicing mindfulness, or engaging "
                "in calming activities like meditation or gentle music."
            ),
        )

    return Insight(
        kind=InsightKind.NEUTRAL,
        title="Balanced Emotional State",
        description=f"Your emotions have been primarily neutral ({percent}% of the time).",
        recommendation="Try engaging in activities that spark joy or excitement to enhance your mood.",
    )


def _variability(snapshot: SessionSnapshot) -> Optional[Insight]:
    minutes = snapshot.minutes
    change_rate = snapshot.change_count / minutes if minutes > 0 else 0.0

    if change_rate > HIGH_VARIABILITY_RATE:
        return Insight(
            kind=InsightKind.CONCERN,
            title="High Emotional Variability",
            description=(
                f"Your emotions changed {snapshot.change_count} times "
                f"in {minutes:.1f} minutes."
            ),
            recommendation=(
                "High emotional variability might indicate stress. Try grounding "
                "techniques: focus on 5 things you can see, 4 you can touch, "
                "3 you can hear."
            ),
        )

    if change_rate < STABLE_RATE and minutes > STABLE_MIN_MINUTES:
        return Insight(
            kind=InsightKind.NEUTRAL,
            title="Stable Emotional State",
            description="Your emotions have been relatively stable throughout the session.",
            recommendation=(
                "Emotional stability is good! Consider adding some variety to your "
                "activities if you feel too monotonous."
            ),
        )

    return None


def _extended_session(snapshot: SessionSnapshot) -> Optional[Insight]:
    minutes = snapshot.minutes
    if minutes <= EXTENDED_SESSION_MINUTES:
        return None

    return Insight(
        kind=InsightKind.POSITIVE,
        title="Extended Session",
        description=f"You've been engaged for {minutes:.1f} minutes.",
        recommendation=(
            "Long sessions can be draining. Consider taking a short break "
            "to stretch or hydrate."
        ),
    )


def _mood_enhancement(shares: Sequence[EmotionShare]) -> Optional[Insight]:
    happy = next((s.percentage for s in shares if s.emotion == Emotion.HAPPY), 0.0)
    if happy >= LOW_HAPPINESS_PERCENT:
        return None

    return Insight(
        kind=InsightKind.NEUTRAL,
        title="Mood Enhancement Opportunity",
        description="Limited positive emotions detected in this session.",
        recommendation=(
            "Try smiling, listening to upbeat music, thinking of something "
            "you're grateful for, or watching something funny."
        ),
    )


def generate_insights(snapshot: SessionSnapshot) -> List[Insight]:
    """
    Turn a session snapshot into insights.

    Returns between one and four insights in rule order: dominant emotion,
    variability, session length, mood enhancement.
    """
    if snapshot.is_empty:
        return [NO_DATA_INSIGHT]

    shares = emotion_percentages(snapshot.histogram)
    insights: List[Insight] = []

    top = dominant_emotion(shares)
    if top is not None:
        insights.append(_classify_dominant(top))

    for rule in (_variability(snapshot), _extended_session(snapshot), _mood_enhancement(shares)):
        if rule is not None:
            insights.append(rule)

    return insights
