"""
Title normalization: turn a raw video/track title into an (artist, song) pair.

The cleanup is expressed as ordered rule tables so each step can be applied
and tested on its own:

    title:  normalize dashes -> keep text before the first pipe -> whitespace
    split:  first " - " separates artist from song
    artist: standardize featuring -> whitespace
    song:   standardize featuring -> bracketed descriptors -> bare noise tags
            -> trailing years -> whitespace -> dangling hyphens
            -> relocate featuring -> whitespace
"""
import logging
import re
from typing import Callable, Optional, Sequence, Tuple

from ..utils.string_utils import normalize_whitespace
from .models import ParsedQuery, TrackInfo

logger = logging.getLogger(__name__)

Rule = Tuple[str, Callable[[str], str]]

_ALT_DASH_RE = re.compile("[–—]")
_SEPARATOR_RE = re.compile(r"\s*-\s*")
_FEATURING_RE = re.compile(r"\b(?:featuring|feat|ft)\b\.?", re.IGNORECASE)
_DOUBLE_FEAT_RE = re.compile(r"feat\.\.", re.IGNORECASE)
_BRACKET_RE = re.compile(r"\s*[\(\[\{]([^)\]\}]*)[\)\]\}]\s*")
_MEANINGFUL_DESCRIPTOR_RE = re.compile(r"(remix|mix|edit|version|feat\.)", re.IGNORECASE)
_PRESERVING_GROUP_RE = re.compile(r"(remix|mix|edit|version)", re.IGNORECASE)
_BARE_FEAT_RE = re.compile(r"\bfeat\.\s+([^(\[{]+?)\s*(?=[(\[{]|$)", re.IGNORECASE)
_DANGLING_SEPARATOR_RE = re.compile(r"^[\s-]+|[\s-]+$")

EXTRANEOUS_TAG_RE = re.compile(
    r"\b(?:official(?:\s+music)?\s+video|official\s+audio|official|lyrics?|audio"
    r"|visualizer|mv|live|performance|cover|karaoke|instrumental|prod\.?"
    r"|remaster(?:ed)?|hd|hq)\b",
    re.IGNORECASE,
)

_YEAR_SUFFIX_RES = (
    re.compile(r"\s*-\s*(?:19|20)\d{2}\s*$"),
    re.compile(r"\s+(?:19|20)\d{2}\s*$"),
    re.compile(r"\s*[\(\[\{]\s*(?:19|20)\d{2}\s*[\)\]\}]\s*$"),
)


def normalize_dashes(value: str) -> str:
    """Replace en/em dashes with a plain hyphen."""
    return _ALT_DASH_RE.sub("-", value)


def extract_primary_segment(value: str) -> str:
    """Drop everything from the first pipe onwards (channel/site branding)."""
    if "|" not in value:
        return value
    return value.split("|", 1)[0].strip()


def standardize_featuring(value: str) -> str:
    """Rewrite feat/ft/featuring (any case, optional period) as ``feat.``."""
    standardized = _FEATURING_RE.sub("feat.", value)
    return _DOUBLE_FEAT_RE.sub("feat.", standardized)


def is_extraneous_descriptor(value: str) -> bool:
    """True if bracketed text is noise that carries no musical meaning."""
    normalized = value.strip()
    if not normalized:
        return True

    if _MEANINGFUL_DESCRIPTOR_RE.search(normalized):
        return False

    return bool(EXTRANEOUS_TAG_RE.search(normalized))


def strip_bracketed_descriptors(value: str) -> str:
    """Remove noise groups; meaningful ones are kept as ``(inner)``."""

    def _replace(match: "re.Match[str]") -> str:
        inner = match.group(1)
        if is_extraneous_descriptor(inner):
            return " "
        return f" ({inner.strip()}) "

    return _BRACKET_RE.sub(_replace, value)


def _should_preserve_tag(value: str, start: int, end: int) -> bool:
    # A tag inside an open "(... remix/mix/edit/version ...)" group belongs
    # to that descriptor.
    open_index = value.rfind("(", 0, start)
    if open_index == -1:
        return False

    close_index = value.find(")", open_index)
    if close_index != -1 and close_index < start:
        return False

    segment = value[open_index + 1:end if close_index == -1 else close_index]
    return bool(_PRESERVING_GROUP_RE.search(segment))


def strip_extraneous_tags(value: str) -> str:
    """Remove bare noise tags that are not part of a preserved descriptor."""

    def _replace(match: "re.Match[str]") -> str:
        if _should_preserve_tag(match.string, match.start(), match.end()):
            return match.group(0)
        return " "

    return EXTRANEOUS_TAG_RE.sub(_replace, value)


def strip_year_suffixes(value: str) -> str:
    """Remove trailing 19xx/20xx years, bare or bracketed, until none is left."""
    previous = None
    while previous != value:
        previous = value
        for pattern in _YEAR_SUFFIX_RES:
            value = pattern.sub(" ", value)
    return value


def strip_dangling_separators(value: str) -> str:
    """Trim hyphens left at either end once trailing segments are removed."""
    return _DANGLING_SEPARATOR_RE.sub("", value)


def relocate_featuring(value: str) -> str:
    """
    Move a bare ``feat. X`` into a ``(feat. X)`` group.

    The featured artists end at the next bracket, so groups that follow
    (e.g. ``(Remix)``) are kept after the new group instead of nested in it.
    """
    match = _BARE_FEAT_RE.search(value)
    if not match or "(feat." in value:
        return value

    base = value[:match.start()].strip()
    featured_artists = match.group(1).strip()
    if not base:
        return value

    relocated = f"{base} (feat. {featured_artists})"
    rest = value[match.end():].strip()
    return f"{relocated} {rest}" if rest else relocated


TITLE_RULES: Sequence[Rule] = (
    ("normalize_dashes", normalize_dashes),
    ("extract_primary_segment", extract_primary_segment),
    ("normalize_whitespace", normalize_whitespace),
)

ARTIST_RULES: Sequence[Rule] = (
    ("standardize_featuring", standardize_featuring),
    ("normalize_whitespace", normalize_whitespace),
)

SONG_RULES: Sequence[Rule] = (
    ("standardize_featuring", standardize_featuring),
    ("strip_bracketed_descriptors", strip_bracketed_descriptors),
    ("strip_extraneous_tags", strip_extraneous_tags),
    ("strip_year_suffixes", strip_year_suffixes),
    ("normalize_whitespace", normalize_whitespace),
    ("strip_dangling_separators", strip_dangling_separators),
    ("relocate_featuring", relocate_featuring),
    ("normalize_whitespace", normalize_whitespace),
)


def apply_rules(value: str, rules: Sequence[Rule]) -> str:
    for _, rule in rules:
        value = rule(value)
    return value


def clean_title(title: str) -> str:
    """Dash-normalized, pipe-truncated, whitespace-collapsed title."""
    return apply_rules(title, TITLE_RULES)


def parse(title: str) -> Optional[TrackInfo]:
    """
    Parse an ``Artist - Song`` title.

    Args:
        title: Raw title, e.g. a video title

    Returns:
        TrackInfo if a separator was found and both halves survive cleanup,
        None otherwise
    """
    if not title:
        logger.debug("Empty title, nothing to parse")
        return None

    cleaned = clean_title(title)
    parts = _SEPARATOR_RE.split(cleaned)
    if len(parts) < 2:
        logger.debug(f"No artist/song separator in '{cleaned}'")
        return None

    artist_raw = parts[0]
    song_raw = " - ".join(parts[1:])
    artist = apply_rules(artist_raw, ARTIST_RULES)
    song = apply_rules(song_raw, SONG_RULES)

    logger.debug(
        f"Parsed '{title}': artist '{artist_raw}' -> '{artist}', "
        f"song '{song_raw}' -> '{song}'"
    )

    if not artist or not song:
        logger.debug("Empty artist or song after normalization")
        return None

    return TrackInfo(artist=artist, song=song)


def normalize(title: str, description: Optional[str] = None) -> ParsedQuery:
    """
    Normalize a title and extract artist/song when possible.

    Always returns a ParsedQuery carrying at least the cleaned title; artist
    and song are only set when ``parse`` succeeds.
    """
    if not title:
        return ParsedQuery(raw_title="", raw_description=description)

    track_info = parse(title)
    return ParsedQuery(
        raw_title=clean_title(title),
        raw_description=description,
        artist=track_info.artist if track_info else None,
        song=track_info.song if track_info else None,
    )
