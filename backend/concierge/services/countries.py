"""
Country and region reference data for location matching.

Hand-curated: canonical name, official name and alternative spellings or
abbreviations travelers actually type. Lookups are case-insensitive.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

# (canonical name, official name, alternative spellings / abbreviations)
COUNTRY_TABLE: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("United States", "United States of America", ("usa", "us", "u.s.", "u.s.a.", "america", "the states")),
    ("United Kingdom", "United Kingdom of Great Britain and Northern Ireland", ("uk", "u.k.", "great britain", "britain", "england", "scotland", "wales", "northern ireland", "gb")),
    ("United Arab Emirates", "United Arab Emirates", ("uae", "u.a.e.", "emirates")),
    ("Canada", "Canada", ()),
    ("Mexico", "United Mexican States", ("méxico",)),
    ("Brazil", "Federative Republic of Brazil", ("brasil",)),
    ("Argentina", "Argentine Republic", ()),
    ("Chile", "Republic of Chile", ()),
    ("Peru", "Republic of Peru", ("perú",)),
    ("Colombia", "Republic of Colombia", ()),
    ("Ecuador", "Republic of Ecuador", ()),
    ("Bolivia", "Plurinational State of Bolivia", ()),
    ("Uruguay", "Oriental Republic of Uruguay", ()),
    ("Costa Rica", "Republic of Costa Rica", ()),
    ("Panama", "Republic of Panama", ()),
    ("Cuba", "Republic of Cuba", ()),
    ("Jamaica", "Jamaica", ()),
    ("Dominican Republic", "Dominican Republic", ()),
    ("Bahamas", "Commonwealth of The Bahamas", ("the bahamas",)),
    ("France", "French Republic", ()),
    ("Italy", "Italian Republic", ("italia",)),
    ("Spain", "Kingdom of Spain", ("españa", "espana")),
    ("Portugal", "Portuguese Republic", ()),
    ("Germany", "Federal Republic of Germany", ("deutschland",)),
    ("Netherlands", "Kingdom of the Netherlands", ("holland", "the netherlands")),
    ("Belgium", "Kingdom of Belgium", ()),
    ("Switzerland", "Swiss Confederation", ("schweiz", "suisse")),
    ("Austria", "Republic of Austria", ()),
    ("Ireland", "Ireland", ("eire", "republic of ireland")),
    ("Iceland", "Iceland", ()),
    ("Norway", "Kingdom of Norway", ()),
    ("Sweden", "Kingdom of Sweden", ()),
    ("Denmark", "Kingdom of Denmark", ()),
    ("Finland", "Republic of Finland", ()),
    ("Poland", "Republic of Poland", ()),
    ("Czech Republic", "Czech Republic", ("czechia",)),
    ("Hungary", "Hungary", ()),
    ("Croatia", "Republic of Croatia", ("hrvatska",)),
    ("Slovenia", "Republic of Slovenia", ()),
    ("Greece", "Hellenic Republic", ("hellas",)),
    ("Turkey", "Republic of Türkiye", ("türkiye", "turkiye")),
    ("Cyprus", "Republic of Cyprus", ()),
    ("Malta", "Republic of Malta", ()),
    ("Montenegro", "Montenegro", ()),
    ("Albania", "Republic of Albania", ()),
    ("Romania", "Romania", ()),
    ("Bulgaria", "Republic of Bulgaria", ()),
    ("Serbia", "Republic of Serbia", ()),
    ("Estonia", "Republic of Estonia", ()),
    ("Latvia", "Republic of Latvia", ()),
    ("Lithuania", "Republic of Lithuania", ()),
    ("Luxembourg", "Grand Duchy of Luxembourg", ()),
    ("Monaco", "Principality of Monaco", ()),
    ("Morocco", "Kingdom of Morocco", ()),
    ("Egypt", "Arab Republic of Egypt", ()),
    ("Tunisia", "Republic of Tunisia", ()),
    ("South Africa", "Republic of South Africa", ()),
    ("Kenya", "Republic of Kenya", ()),
    ("Tanzania", "United Republic of Tanzania", ()),
    ("Namibia", "Republic of Namibia", ()),
    ("Botswana", "Republic of Botswana", ()),
    ("Ghana", "Republic of Ghana", ()),
    ("Nigeria", "Federal Republic of Nigeria", ()),
    ("Ethiopia", "Federal Democratic Republic of Ethiopia", ()),
    ("Rwanda", "Republic of Rwanda", ()),
    ("Madagascar", "Republic of Madagascar", ()),
    ("Mauritius", "Republic of Mauritius", ()),
    ("Seychelles", "Republic of Seychelles", ()),
    ("Israel", "State of Israel", ()),
    ("Jordan", "Hashemite Kingdom of Jordan", ()),
    ("Saudi Arabia", "Kingdom of Saudi Arabia", ("ksa",)),
    ("Qatar", "State of Qatar", ()),
    ("Oman", "Sultanate of Oman", ()),
    ("India", "Republic of India", ("bharat",)),
    ("Nepal", "Federal Democratic Republic of Nepal", ()),
    ("Sri Lanka", "Democratic Socialist Republic of Sri Lanka", ()),
    ("Maldives", "Republic of Maldives", ("the maldives",)),
    ("China", "People's Republic of China", ("prc",)),
    ("Japan", "Japan", ("nippon",)),
    ("South Korea", "Republic of Korea", ("korea",)),
    ("Taiwan", "Taiwan", ()),
    ("Thailand", "Kingdom of Thailand", ("siam",)),
    ("Vietnam", "Socialist Republic of Viet Nam", ("viet nam",)),
    ("Cambodia", "Kingdom of Cambodia", ()),
    ("Laos", "Lao People's Democratic Republic", ()),
    ("Malaysia", "Malaysia", ()),
    ("Singapore", "Republic of Singapore", ()),
    ("Indonesia", "Republic of Indonesia", ()),
    ("Philippines", "Republic of the Philippines", ("the philippines",)),
    ("Australia", "Commonwealth of Australia", ("oz",)),
    ("New Zealand", "New Zealand", ("aotearoa", "nz")),
    ("Fiji", "Republic of Fiji", ()),
)

# Synonyms that are also ordinary English words and would fire on normal chat
STOP_WORD_SYNONYMS = frozenset({"us", "oz", "gb"})

REGION_KEYWORDS: Dict[str, str] = {
    "europe": "Europe",
    "western europe": "Western Europe",
    "eastern europe": "Eastern Europe",
    "scandinavia": "Scandinavia",
    "balkans": "Balkans",
    "the balkans": "Balkans",
    "mediterranean": "Mediterranean",
    "asia": "Asia",
    "southeast asia": "Southeast Asia",
    "south east asia": "Southeast Asia",
    "middle east": "Middle East",
    "africa": "Africa",
    "north africa": "North Africa",
    "east africa": "East Africa",
    "north america": "North America",
    "south america": "South America",
    "central america": "Central America",
    "latin america": "Latin America",
    "caribbean": "Caribbean",
    "the caribbean": "Caribbean",
    "oceania": "Oceania",
    "pacific islands": "Pacific Islands",
}


def _build_synonym_index() -> Dict[str, str]:
    index: Dict[str, str] = {}
    for canonical, official, alternatives in COUNTRY_TABLE:
        for name in (canonical, official) + alternatives:
            key = name.lower()
            if key in STOP_WORD_SYNONYMS:
                continue
            index.setdefault(key, canonical)
    return index


COUNTRY_SYNONYMS: Dict[str, str] = _build_synonym_index()

# Longest first so "united states of america" wins over "america"
SYNONYMS_BY_LENGTH: List[str] = sorted(COUNTRY_SYNONYMS, key=len, reverse=True)
REGIONS_BY_LENGTH: List[str] = sorted(REGION_KEYWORDS, key=len, reverse=True)


def lookup_country(name: str) -> Optional[str]:
    """Canonical country name for an exact (case-insensitive) synonym."""
    if not name:
        return None
    return COUNTRY_SYNONYMS.get(name.strip().lower())


def lookup_region(name: str) -> Optional[str]:
    if not name:
        return None
    return REGION_KEYWORDS.get(name.strip().lower())
