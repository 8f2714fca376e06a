from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from metafilter.core.rules import RuleSet, compile_rules

logger = logging.getLogger(__name__)

YOUTUBE_TRACK_PATTERNS = (
    # Trim whitespaces
    (r"^\s+", ""),
    (r"\s+\Z", ""),
    # **NEW**
    (r"\*+\s?\S+\s?\*+\Z", ""),
    # [whatever]
    (r"\[[^\]]+\]", ""),
    # (whatever version)
    (r"(?i)\([^)]*version\)\Z", ""),
    # video extensions
    (r"(?i)\.(avi|wmv|mpg|mpeg|flv)\Z", ""),
    # (LYRICs VIDEO)
    (r"(?i)\(.*lyrics?\s*(video)?\)", ""),
    # (Official Track Stream)
    (r"(?i)\((of+icial\s*)?(track\s*)?stream\)", ""),
    # (official)? (music)? video
    (r"(?i)\((of+icial\s*)?(music\s*)?video\)", ""),
    # (official)? (music)? audio
    (r"(?i)\((of+icial\s*)?(music\s*)?audio\)", ""),
    # (ALBUM TRACK)
    (r"(?i)(ALBUM TRACK\s*)?(album track\s*)", ""),
    # (Cover Art)
    (r"(?i)(COVER ART\s*)?(Cover Art\s*)", ""),
    # (official)
    (r"(?i)\(\s*of+icial\s*\)", ""),
    # (1999)
    (r"(?i)\(\s*[0-9]{4}\s*\)", ""),
    # HD (HQ)
    (r"(HD|HQ)\s*\Z", ""),
    # video clip officiel or video clip official
    (r"(?i)(vid[ée]o)?\s?clip\sof+ici[ae]l", ""),
    # offizielles
    (r"(?i)of+iziel+es\s*video", ""),
    # video clip
    (r"(?i)vid[ée]o\s?clip", ""),
    # clip
    (r"(?i)\sclip", ""),
    # Full Album
    (r"(?i)full\s*album", ""),
    # (live)
    (r"(?i)\(live.*?\)\Z", ""),
    # | something
    (r"(?i)\|.*\Z", ""),
    # Artist - The new "Track title" featuring someone
    (r'^(|.*\s)"(.{5,})"(\s.*|)\Z', "$2"),
    # 'Track title'
    (r"^(|.*\s)'(.{5,})'(\s.*|)\Z", "$2"),
    # (*01/01/1999*)
    (r"(?i)\(.*[0-9]{1,2}/[0-9]{1,2}/[0-9]{2,4}.*\)", ""),
    # Sub Español
    (r"(?i)sub\s*español", ""),
    # (Letra/Lyrics)
    (r"(?i)\s\(Letra/Lyrics\)", ""),
    # (Letra)
    (r"(?i)\s\(Letra\)", ""),
    # (En vivo)
    (r"(?i)\s\(En\svivo\)", ""),
)

TRIM_SYMBOLS_PATTERNS = (
    # Leftovers after e.g. (official video)
    (r"\(+\s*\)+", ""),
    # Leading and trailing white chars and dashes
    (r'^[/,:;~\s"-]+', ""),
    (r'[/,:;~\s"-]+\Z', ""),
)

REMASTERED_PATTERNS = (
    # Here Comes The Sun - Remastered
    (r"-\sRemastered\Z", ""),
    # Hey Jude - Remastered 2015
    (r"-\sRemastered\s\d+\Z", ""),
    # Let It Be (Remastered 2009)
    # Red Rain (Remaster 2012)
    (r"\(Remaster(ed)?\s\d+\)\Z", ""),
    # Pigs On The Wing (Part One) [2011 - Remaster]
    (r"\[\d+\s-\sRemaster\]\Z", ""),
    # Comfortably Numb (2011 - Remaster)
    # Dancing Days (2012 Remaster)
    (r"\(\d+(\s-)?\sRemaster\)\Z", ""),
    # Outside The Wall - 2011 - Remaster
    # China Grove - 2006 Remaster
    (r"-\s\d+(\s-)?\sRemaster\Z", ""),
    # Learning To Fly - 2001 Digital Remaster
    (r"-\s\d+\s.+?\sRemaster\Z", ""),
    # Your Possible Pasts - 2011 Remastered Version
    (r"-\s\d+\sRemastered Version\Z", ""),
    # Roll Over Beethoven (Live / Remastered)
    (r"\(Live\s/\sRemastered\)\Z", ""),
    # Ticket To Ride - Live / Remastered
    (r"-\sLive\s/\sRemastered\Z", ""),
    # Mothership (Remastered)
    # How The West Was Won [Remastered]
    (r"[(\[]Remastered[)\]]\Z", ""),
    # A Well Respected Man (2014 Remastered Version)
    (r"[(\[]\d{4} Re[Mm]astered Version[)\]]\Z", ""),
    # She Was Hot (2009 Re-Mastered Digital Version)
    (r"[(\[]\d{4} Re-?[Mm]astered Digital Version[)\]]\Z", ""),
    # In The Court Of The Crimson King (Expanded & Remastered Original Album Mix)
    (r"\([^(]*Remaster[^)]*\)\Z", ""),
)

LIVE_PATTERNS = (
    # Track - Live
    (r"-\sLive?\Z", ""),
    # Track - Live at Wembley
    (r"-\sLive\s.+?\Z", ""),
)

CLEAN_EXPLICIT_PATTERNS = (
    (r"(?i)\s[(\[]Explicit[)\]]", ""),
    (r"(?i)\s[(\[]Clean[)\]]", ""),
)

FEATURE_PATTERNS = (
    # [Feat. Artist] or (Feat. Artist)
    (r"(?i)\s[(\[]feat. .+[)\]]", ""),
)

NORMALIZE_FEATURE_PATTERNS = (
    # (Feat. Artist) -> Feat. Artist
    (r"(?i)\s[(\[](feat. .+)[)\]]", " $1"),
)

VERSION_PATTERNS = (
    # Love Will Come To You (Album Version)
    (r"[(\[]Album Version[)\]]\Z", ""),
    # I Melt With You (Rerecorded)
    # When I Need You [Re-Recorded]
    (r"[(\[]Re-?[Rr]ecorded[)\]]\Z", ""),
    # Your Cheatin' Heart (Single Version)
    (r"[(\[]Single Version[)\]]\Z", ""),
    # All Over Now (Edit)
    (r"[(\[]Edit[)\]]\Z", ""),
    # (I Can't Get No) Satisfaction - Mono Version
    (r"-\sMono Version\Z", ""),
    # Ruby Tuesday - Stereo Version
    (r"-\sStereo Version\Z", ""),
    # Pure McCartney (Deluxe Edition)
    (r"\(Deluxe Edition\)\Z", ""),
    # 6 Foot 7 Foot (Explicit Version)
    (r"(?i)[(\[]Explicit Version[)\]]", ""),
)

SUFFIX_PATTERNS = (
    # "- X Remix" -> "(X Remix)"
    (r"(?i)-\s(.+?)\s((Re)?mix|edit|dub|mix|vip|version)\Z", "($1 $2)"),
    (r"(?i)-\s(Remix|VIP)\Z", "($1)"),
)

TRIM_WHITESPACE_PATTERNS = (
    (r"^\s+", ""),
    (r"\s+\Z", ""),
)


def _catalog(name: str, table: tuple[tuple[str, str], ...], doc: str) -> Callable[[], RuleSet]:
    # Compile on first use, exactly once per process.
    lock = threading.Lock()
    compiled: list[RuleSet] = []

    def build() -> RuleSet:
        if compiled:
            return compiled[0]
        with lock:
            if not compiled:
                compiled.append(compile_rules(table))
                logger.debug("Compiled %d filter rules", len(table))
        return compiled[0]

    build.__name__ = build.__qualname__ = name
    build.__doc__ = doc
    return build


youtube_track_filter_rules = _catalog(
    "youtube_track_filter_rules",
    YOUTUBE_TRACK_PATTERNS,
    "Rules removing video-platform suffixes and prefixes from a title.",
)
trim_symbols_filter_rules = _catalog(
    "trim_symbols_filter_rules",
    TRIM_SYMBOLS_PATTERNS,
    "Rules removing leftovers after youtube filtering.",
)
remastered_filter_rules = _catalog(
    "remastered_filter_rules",
    REMASTERED_PATTERNS,
    "Rules removing remaster tags.",
)
live_filter_rules = _catalog(
    "live_filter_rules",
    LIVE_PATTERNS,
    "Rules removing live tags.",
)
clean_explicit_filter_rules = _catalog(
    "clean_explicit_filter_rules",
    CLEAN_EXPLICIT_PATTERNS,
    "Rules removing explicit and clean tags.",
)
feature_filter_rules = _catalog(
    "feature_filter_rules",
    FEATURE_PATTERNS,
    "Rules removing feature credits.",
)
normalize_feature_filter_rules = _catalog(
    "normalize_feature_filter_rules",
    NORMALIZE_FEATURE_PATTERNS,
    "Rules rewriting a bracketed feature credit to ' Feat. Artist', keeping one space before it.",
)
version_filter_rules = _catalog(
    "version_filter_rules",
    VERSION_PATTERNS,
    "Rules removing album, single, mono and stereo version tags.",
)
suffix_filter_rules = _catalog(
    "suffix_filter_rules",
    SUFFIX_PATTERNS,
    "Rules turning a '- X Remix' suffix into '(X Remix)'.",
)
trim_whitespace_filter_rules = _catalog(
    "trim_whitespace_filter_rules",
    TRIM_WHITESPACE_PATTERNS,
    "Rules removing leading and trailing whitespace.",
)

CATALOGS: dict[str, Callable[[], RuleSet]] = {
    "youtube": youtube_track_filter_rules,
    "trim-symbols": trim_symbols_filter_rules,
    "remastered": remastered_filter_rules,
    "live": live_filter_rules,
    "clean-explicit": clean_explicit_filter_rules,
    "feature": feature_filter_rules,
    "normalize-feature": normalize_feature_filter_rules,
    "version": version_filter_rules,
    "suffix": suffix_filter_rules,
    "trim-whitespace": trim_whitespace_filter_rules,
}


class UnknownCatalog(KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown catalog: {self.name}"


def get_catalog(name: str, extra: dict[str, RuleSet] | None = None) -> RuleSet:
    key = name.strip().lower()
    if extra and key in extra:
        return extra[key]
    if key not in CATALOGS:
        raise UnknownCatalog(name)
    return CATALOGS[key]()


def compose(*names: str, extra: dict[str, RuleSet] | None = None) -> RuleSet:
    rules: RuleSet = ()
    for name in names:
        rules += get_catalog(name, extra)
    return rules
