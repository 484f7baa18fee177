from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from models import Mood

analyzer = SentimentIntensityAnalyzer()


def suggest_mood(text):
    """
    Guess a mood from free text. Only a hint; the user's pick always wins.
    VADER scores English words only, so Chinese text comes back NEUTRAL.
    """
    compound = analyzer.polarity_scores(text or "")["compound"]
    if compound >= 0.6:
        return Mood.VERY_HAPPY
    elif compound >= 0.05:
        return Mood.HAPPY
    elif compound <= -0.6:
        return Mood.VERY_SAD
    elif compound <= -0.05:
        return Mood.SAD
    return Mood.NEUTRAL
