# src/analyzer/utils/stopwords.py
import functools

STOPWORDS_EN = frozenset({
    "a", "about", "all", "also", "an", "and", "any", "are", "as", "at", "be", "been", "being", "but", "by",
    "can", "could", "did", "do", "does", "each", "for", "from", "get", "got", "had", "has", "have", "her",
    "him", "his", "how", "if", "in", "into", "is", "it", "its", "just", "let", "like", "many", "may", "might",
    "more", "most", "much", "must", "new", "no", "not", "now", "of", "off", "on", "one", "only", "or", "other",
    "our", "out", "over", "own", "per", "see", "shall", "she", "should", "so", "some", "still", "such", "than",
    "that", "the", "their", "them", "then", "they", "this", "to", "too", "two", "under", "up", "upon", "use",
    "very", "via", "was", "were", "what", "when", "where", "which", "who", "why", "will", "with", "would",
    "yes", "yet", "you", "your",
})

# Navigation and consent boilerplate that says nothing about the page topic.
STOPWORDS_WEB = frozenset({
    "cookie", "cookies", "menu", "login", "logout", "signup", "subscribe", "privacy", "policy", "terms",
    "javascript", "click", "skip", "navigation", "copyright", "rights", "reserved",
})


def get_stopwords():
    return STOPWORDS_EN, STOPWORDS_WEB


def combine_stopwords(func):
    """Decorator that injects the combined stopword set when the caller passes none."""
    @functools.wraps(func)
    def wrapper(text, stopwords=None, *args, **kwargs):
        if stopwords is None:
            stopwords = frozenset().union(*get_stopwords())
        return func(text, stopwords, *args, **kwargs)
    return wrapper
