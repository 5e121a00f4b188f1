"""
Experience category taxonomy.

Eighteen labels, each with a description (shown by GET /concierge/categories)
and the keywords that select it. The first label in table order whose
keywords appear in the text wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import re


@dataclass(frozen=True)
class CategoryDefinition:
    label: str
    description: str
    keywords: Tuple[str, ...]


CATEGORY_TAXONOMY: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        "Adventure & Outdoor",
        "Thrilling experiences in the open air, from hiking trails to adrenaline adventures.",
        ("adventure", "outdoor", "outdoors", "hike", "hiking", "trek", "trekking", "climb",
         "climbing", "zipline", "zip line", "canyoning", "rafting", "paragliding", "bungee",
         "off-road", "atv", "camping", "mountain biking", "adrenaline"),
    ),
    CategoryDefinition(
        "Nature & Wildlife",
        "Explore biodiversity and connect with the natural world and its habitats.",
        ("nature", "wildlife", "safari", "birdwatching", "bird watching", "forest", "national park",
         "animal", "jungle", "rainforest", "waterfall", "botanical", "whale watching", "glacier"),
    ),
    CategoryDefinition(
        "Water Activities",
        "Sail, swim, and dive into aquatic adventures above and below the surface.",
        ("snorkel", "snorkeling", "scuba", "diving", "dive", "surf", "surfing", "kayak",
         "kayaking", "canoe", "sailing", "boat", "paddleboard", "paddle", "swim", "swimming",
         "jet ski", "water sports"),
    ),
    CategoryDefinition(
        "Food, Drinks & Culinary",
        "Taste, sip, and cook your way through immersive culinary journeys.",
        ("food", "foodie", "culinary", "cooking", "cook", "wine", "tasting", "dinner", "lunch",
         "brunch", "eat", "eating", "street food", "chef", "cuisine", "gastronomy", "beer",
         "brewery", "coffee", "cocktail", "pasta", "sushi", "vineyard", "winery"),
    ),
    CategoryDefinition(
        "Culture & History",
        "Discover local heritage, stories, and iconic landmarks with expert hosts.",
        ("culture", "cultural", "history", "historic", "historical", "heritage", "museum",
         "ancient", "ruins", "castle", "temple", "archaeology", "monument", "tradition"),
    ),
    CategoryDefinition(
        "Art, Design & Photography",
        "Creative workshops and visual explorations for art and design lovers.",
        ("art", "artist", "gallery", "design", "photo", "photography", "photographer",
         "painting", "sculpture", "architecture", "street art"),
    ),
    CategoryDefinition(
        "Music, Nightlife & Social",
        "Groove through vibrant nights, live performances, and social hangouts.",
        ("music", "concert", "nightlife", "night out", "club", "clubbing", "bar crawl",
         "pub crawl", "pub", "dance", "dancing", "jazz", "karaoke", "live band", "dj"),
    ),
    CategoryDefinition(
        "Sports, Fitness & Well-Being",
        "Active escapes focused on movement, health, and mindful balance.",
        ("sport", "fitness", "yoga", "gym", "running", "run", "cycling", "bike", "golf",
         "tennis", "spa", "wellness", "massage", "pilates", "marathon", "workout"),
    ),
    CategoryDefinition(
        "Workshops & Skill-Learning",
        "Hands-on classes to master new crafts, skills, and creative passions.",
        ("workshop", "class", "lesson", "course", "learn", "learning", "masterclass",
         "pottery", "craft", "hands-on"),
    ),
    CategoryDefinition(
        "Tours & Sightseeing",
        "Guided explorations that uncover hidden gems and iconic views.",
        ("tour", "sightseeing", "guided", "excursion", "day trip", "landmark", "sights",
         "city walk", "walking"),
    ),
    CategoryDefinition(
        "Luxury, VIP & Exclusive Access",
        "Premium experiences with special access and elevated service.",
        ("luxury", "vip", "exclusive", "private", "premium", "yacht", "helicopter",
         "limousine", "first class"),
    ),
    CategoryDefinition(
        "Spirituality, Retreats & Healing",
        "Restorative journeys for mindfulness, wellness, and inner balance.",
        ("spiritual", "spirituality", "retreat", "meditation", "healing", "mindfulness",
         "reiki", "sound bath", "ayurveda"),
    ),
    CategoryDefinition(
        "Transportation & Logistics",
        "Seamless mobility services and scenic rides that connect each moment.",
        ("transfer", "airport", "shuttle", "transport", "transportation", "car rental",
         "chauffeur", "taxi", "driver", "scenic ride"),
    ),
    CategoryDefinition(
        "Events, Festivals & Seasonal",
        "Timely gatherings celebrating culture, tradition, and special occasions.",
        ("festival", "event", "carnival", "christmas", "new year", "holiday market",
         "seasonal", "parade"),
    ),
    CategoryDefinition(
        "Volunteer & Community Impact",
        "Give back with meaningful projects that support local communities.",
        ("volunteer", "volunteering", "charity", "community", "conservation", "give back",
         "nonprofit"),
    ),
    CategoryDefinition(
        "Romantic & Special Occasions",
        "Curated moments for couples, celebrations, and heartfelt memories.",
        ("romantic", "romance", "honeymoon", "anniversary", "proposal", "date night",
         "couples", "birthday", "celebration", "wedding"),
    ),
    CategoryDefinition(
        "Family & Kids Activities",
        "Playful adventures crafted for little explorers and their grown-ups.",
        ("family", "kids", "children", "child", "toddler", "teen", "teens", "family-friendly"),
    ),
    CategoryDefinition(
        "Business & Networking",
        "Professional meetups, corporate escapes, and industry networking events.",
        ("business", "networking", "corporate", "team building", "conference", "offsite",
         "meetup"),
    ),
)

CATEGORY_LABELS: Tuple[str, ...] = tuple(entry.label for entry in CATEGORY_TAXONOMY)


def _keyword_pattern(keywords: Tuple[str, ...]) -> "re.Pattern":
    # Keywords match from a word start ("snorkel" -> "snorkelling"); keywords of
    # three letters or fewer must be whole words, so "spa" never fires on "spain"
    short_words = [k for k in keywords if len(k) <= 3]
    prefixes = sorted((k for k in keywords if len(k) > 3), key=len, reverse=True)
    branches = []
    if prefixes:
        branches.append(r"\b(?:" + "|".join(re.escape(k) for k in prefixes) + ")")
    if short_words:
        branches.append(r"\b(?:" + "|".join(re.escape(k) for k in short_words) + r")(?:s|es)?\b")
    return re.compile("|".join(branches))


_CATEGORY_PATTERNS: Tuple[Tuple[str, "re.Pattern"], ...] = tuple(
    (entry.label, _keyword_pattern(entry.keywords)) for entry in CATEGORY_TAXONOMY
)


def extract_category(text: str) -> Optional[str]:
    normalized = re.sub(r"\s+", " ", (text or "").lower()).strip()
    if not normalized:
        return None
    for label, pattern in _CATEGORY_PATTERNS:
        if pattern.search(normalized):
            return label
    return None


def canonical_category(value: Optional[str]) -> Optional[str]:
    """Exact taxonomy label for a case-insensitive label, else None."""
    if not value:
        return None
    lowered = value.strip().lower()
    for label in CATEGORY_LABELS:
        if label.lower() == lowered:
            return label
    return None

