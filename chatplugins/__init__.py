"""Group chat bot logic: sign-in scores, sleep tracking, wordle, tarot, hot words, quiz and quote lookups, picture sets."""

__version__ = "0.1.0"

__all__ = [
    "score",
    "sleep",
    "wordle",
    "wtf",
    "vtb",
    "vtbmenu",
    "tarot",
    "wordcount",
    "ymgal",
]