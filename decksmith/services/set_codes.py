"""
Pokémon set abbreviations.

Deck lists name printings by their deck abbreviation ("SVI 057"); card
services index them by release id ("sv01-057"). The era lists drive
both game classification and the regulation-mark-less format fallback.
"""

# Deck abbreviation -> card-service set id
DECK_CODE_TO_SET_ID: dict[str, str] = {
    # Scarlet & Violet main sets
    "SVI": "sv01",
    "PAL": "sv02",
    "OBF": "sv03",
    "PAR": "sv04",
    "TEF": "sv05",
    "TWM": "sv06",
    "SCR": "sv07",
    "SSP": "sv08",
    "JTG": "sv09",
    "DRI": "sv10",
    # Scarlet & Violet mini sets
    "MEW": "sv03.5",
    "PAF": "sv04.5",
    "SFA": "sv06.5",
    "PRE": "sv08.5",
    "SVE": "sve",
    "SVP": "svp",
    # Sword & Shield
    "CRZ": "swsh12.5",
    "SIT": "swsh12",
    "PGO": "swsh11.5",
    "LOR": "swsh11",
    "ASR": "swsh10",
    "BRS": "swsh9",
    "FST": "swsh8",
    "CEL": "swsh7.5",
    "EVS": "swsh7",
    "CRE": "swsh6",
    "BST": "swsh5",
    "SHF": "swsh4.5",
    "VIV": "swsh4",
    "CPA": "swsh3.5",
    "DAA": "swsh3",
    "RCL": "swsh2",
    "SSH": "swsh1",
}

# Sets whose cards carry Standard-era regulation marks
STANDARD_ERA_CODES: frozenset[str] = frozenset(
    {
        "SVI", "PAL", "OBF", "MEW", "PAR", "PAF", "TEF", "TWM",
        "SFA", "SCR", "SSP", "PRE", "SVE", "SVP", "JTG", "DRI",
    }
)

# Sets only legal in Expanded
EXPANDED_ERA_CODES: frozenset[str] = frozenset(
    {
        "SSH", "RCL", "DAA", "VIV", "BST", "CRE", "EVS", "FST", "BRS",
        "ASR", "PGO", "LOR", "SIT", "CRZ", "SUM", "GRI", "BUS",
    }
)

KNOWN_POKEMON_CODES: frozenset[str] = (
    frozenset(DECK_CODE_TO_SET_ID) | STANDARD_ERA_CODES | EXPANDED_ERA_CODES
)


def normalize_set_code(set_code: str) -> str:
    """Deck abbreviation to card-service set id ("SSP" -> "sv08")."""
    upper = set_code.upper()
    return DECK_CODE_TO_SET_ID.get(upper, set_code.lower())


def card_id_for(set_code: str, collector_number: str) -> str:
    """Card-service id of one printing ("PAR", "123" -> "sv04-123")."""
    return f"{normalize_set_code(set_code)}-{collector_number}"


def is_known_pokemon_code(set_code: str | None) -> bool:
    return bool(set_code) and set_code.upper() in KNOWN_POKEMON_CODES


def is_expanded_era_code(set_code: str | None) -> bool:
    return bool(set_code) and set_code.upper() in EXPANDED_ERA_CODES
