"""Sharp sportsbook classification.

Sharp books (Pinnacle, Circa, BetCRIS) set efficient lines close to true
probabilities, so their de-vigged prices are the reference for fair odds.
Soft books (DraftKings, FanDuel, etc.) cater to recreational bettors and are
what the engine compares against that reference.

The allow-list is per sport; lookups are case-insensitive and unknown sports
fall back to the default list.
"""

DEFAULT_SPORT = "default"

# Sharp books (efficient markets, treated as the fair reference) by sport
SHARP_BOOKS_BY_SPORT: dict[str, list[str]] = {
    "nba": ["pinnacle", "circa", "betcris"],
    "nhl": ["pinnacle", "circa", "betcris"],
    "ncaab": ["pinnacle", "circa"],
    "nfl": ["pinnacle", "circa", "betcris"],
    "mlb": ["pinnacle", "circa", "betcris"],
    DEFAULT_SPORT: ["pinnacle", "circa", "betcris"],
}

# Soft books (recreational, potentially mispriced)
SOFT_BOOKS = {"draftkings", "fanduel", "betmgm", "caesars", "bet365", "pointsbet", "betrivers"}

# Sharp book counts required for each confidence grade
MIN_SHARP_BOOKS_FOR_HIGH_CONFIDENCE = 2
MIN_SHARP_BOOKS_FOR_MEDIUM_CONFIDENCE = 1


class BookClassifier:
    """Per-sport sharp book allow-list.

    Constructed explicitly and passed to the fair odds engine so tests and
    callers can swap in their own lists.

    Example:
        >>> classifier = BookClassifier()
        >>> classifier.is_sharp("Pinnacle", "NBA")
        True
        >>> classifier.sharp_books("curling")
        ['pinnacle', 'circa', 'betcris']
    """

    def __init__(self, books_by_sport: dict[str, list[str]] | None = None) -> None:
        source = books_by_sport if books_by_sport is not None else SHARP_BOOKS_BY_SPORT
        self._books_by_sport = {
            sport.lower(): [book.lower() for book in books]
            for sport, books in source.items()
        }
        self._books_by_sport.setdefault(DEFAULT_SPORT, list(SHARP_BOOKS_BY_SPORT[DEFAULT_SPORT]))

    def sharp_books(self, sport: str | None) -> list[str]:
        """Sharp books for a sport, falling back to the default list."""
        key = (sport or DEFAULT_SPORT).lower()
        return list(self._books_by_sport.get(key, self._books_by_sport[DEFAULT_SPORT]))

    def is_sharp(self, book: str, sport: str | None) -> bool:
        """Check if a book is sharp for a sport (case-insensitive)."""
        return book.lower() in self.sharp_books(sport)
