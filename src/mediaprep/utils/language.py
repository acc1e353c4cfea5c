"""Language code conversion utilities."""

from typing import Optional

# ISO 639-1 (2-letter) code -> (ISO 639-2/B code, English name)
# MediaInfo reports ISO 639-1 codes; Matroska and ffmpeg use ISO 639-2/B
LANGUAGES = {
    "en": ("eng", "English"),
    "es": ("spa", "Spanish"),
    "fr": ("fre", "French"),
    "de": ("ger", "German"),
    "it": ("ita", "Italian"),
    "pt": ("por", "Portuguese"),
    "ru": ("rus", "Russian"),
    "ja": ("jpn", "Japanese"),
    "ko": ("kor", "Korean"),
    "zh": ("chi", "Chinese"),
    "ar": ("ara", "Arabic"),
    "hi": ("hin", "Hindi"),
    "nl": ("dut", "Dutch"),
    "pl": ("pol", "Polish"),
    "tr": ("tur", "Turkish"),
    "sv": ("swe", "Swedish"),
    "da": ("dan", "Danish"),
    "no": ("nor", "Norwegian"),
    "fi": ("fin", "Finnish"),
    "cs": ("cze", "Czech"),
    "hu": ("hun", "Hungarian"),
    "ro": ("rum", "Romanian"),
    "th": ("tha", "Thai"),
    "vi": ("vie", "Vietnamese"),
    "id": ("ind", "Indonesian"),
    "he": ("heb", "Hebrew"),
    "el": ("gre", "Greek"),
    "uk": ("ukr", "Ukrainian"),
    "ca": ("cat", "Catalan"),
    "sk": ("slo", "Slovak"),
    "hr": ("hrv", "Croatian"),
    "sr": ("srp", "Serbian"),
    "bg": ("bul", "Bulgarian"),
    "lt": ("lit", "Lithuanian"),
    "lv": ("lav", "Latvian"),
    "et": ("est", "Estonian"),
    "sl": ("slv", "Slovenian"),
    "fa": ("per", "Persian"),
    "ms": ("may", "Malay"),
    "ta": ("tam", "Tamil"),
    "te": ("tel", "Telugu"),
    "bn": ("ben", "Bengali"),
    "mr": ("mar", "Marathi"),
}

# ISO 639-2/T terminology codes that differ from the bibliographic ones
ISO_639_2_T_TO_B = {
    "fra": "fre",
    "deu": "ger",
    "zho": "chi",
    "nld": "dut",
    "ces": "cze",
    "ron": "rum",
    "ell": "gre",
    "slk": "slo",
    "fas": "per",
    "msa": "may",
}

_CODE_TO_NAME = {code: name for code, name in LANGUAGES.values()}


def normalize_language_code(code: Optional[str]) -> Optional[str]:
    """Normalize a language code to 3-letter ISO 639-2/B.

    Handles 2-letter codes, 3-letter T and B codes and region suffixes
    (``en-US``). Unknown codes are returned lowercased.

    Args:
        code: Language code

    Returns:
        Normalized 3-letter code, or None for empty input
    """
    if not code:
        return None

    code_lower = code.strip().lower().split("-")[0]
    if len(code_lower) == 2 and code_lower in LANGUAGES:
        return LANGUAGES[code_lower][0]
    return ISO_639_2_T_TO_B.get(code_lower, code_lower)


def language_name(code: Optional[str]) -> Optional[str]:
    """Return the English display name for a language code, if known."""
    normalized = normalize_language_code(code)
    if normalized is None:
        return None
    return _CODE_TO_NAME.get(normalized)


def languages_match(track_code: Optional[str], wanted: Optional[str]) -> bool:
    """Compare two language codes after normalization."""
    if not track_code or not wanted:
        return False
    return normalize_language_code(track_code) == normalize_language_code(wanted)
