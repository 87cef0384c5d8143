"""Canonical identity keys for games, bet groups and selections.

Identical logical inputs always produce identical keys, which is what makes
deduplication across pages and pairing of opposite sides possible.

Formats:
    game_id        {league}:{YYYY-MM-DD}:{AWAY}-{HOME}
    bet_group_key  {game_id}|{market_key}|{subject_id}|{line}
    selection_key  {bet_group_key}:{side}
"""

from datetime import date, datetime


def normalize_team_code(team: str) -> str:
    """Normalize a team code (upper-case, trimmed)."""
    return team.strip().upper()


def normalize_player_id(name: str, disambiguation_id: str | None = None) -> str:
    """Normalize a player name into a subject id.

    Examples:
        >>> normalize_player_id("D'Angelo Russell")
        'dangelo-russell'
        >>> normalize_player_id("P.J. Washington", "123")
        'pj-washington-123'
    """
    normalized = (
        name.strip()
        .lower()
        .replace(" ", "-")
        .replace("'", "")
        .replace(".", "")
    )
    if disambiguation_id:
        normalized = f"{normalized}-{disambiguation_id}"
    return normalized


def format_line(line: float) -> str:
    """Format a line value with exactly one decimal place."""
    return f"{line:.1f}"


def build_game_id(
    league: str,
    game_date: date | datetime,
    away_team: str,
    home_team: str,
) -> str:
    """Build a canonical game id.

    Args:
        league: League code (lower-cased in the key)
        game_date: Game date; datetimes are reduced to their calendar day
        away_team: Away team code
        home_team: Home team code

    Example:
        >>> build_game_id("NBA", date(2024, 1, 31), "bos", " lal ")
        'nba:2024-01-31:BOS-LAL'
    """
    if isinstance(game_date, datetime):
        game_date = game_date.date()
    away = normalize_team_code(away_team)
    home = normalize_team_code(home_team)
    return f"{league.strip().lower()}:{game_date.isoformat()}:{away}-{home}"


def build_bet_group_key(
    game_id: str,
    market_key: str,
    subject_id: str | None = None,
    line: float | None = None,
) -> str:
    """Build a canonical bet group key.

    ``subject_id`` is empty for team-level markets and ``line`` is empty for
    markets without a line.

    Example:
        >>> build_bet_group_key("nba:2024-01-31:BOS-LAL", "total", line=220.5)
        'nba:2024-01-31:BOS-LAL|total||220.5'
    """
    subject_part = subject_id or ""
    line_part = format_line(line) if line is not None else ""
    return f"{game_id}|{market_key}|{subject_part}|{line_part}"


def build_selection_key(bet_group_key: str, side: str) -> str:
    """Build a canonical selection key from a bet group key and a side."""
    side_value = getattr(side, "value", side)
    return f"{bet_group_key}:{side_value}"
