"""English text modifiers.

Each modifier is a total `str -> str` function; names in ENG_MODIFIERS are the
ones grammar authors write after a dot, e.g. `#animal.a.capitalize#`.
"""
from __future__ import annotations

from types import MappingProxyType

from tracery_engine.core.model import ModifierMap


VOWELS = frozenset("aeiou")


def is_vowel(c: str) -> bool:
    return c.lower() in VOWELS if c else False


def is_alnum(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9")


def capitalize_all(text: str) -> str:
    """Capitalize the first letter of every word."""
    out: list[str] = []
    cap_next = True
    for c in text:
        if not is_alnum(c):
            cap_next = True
            out.append(c)
        elif cap_next:
            out.append(c.upper())
            cap_next = False
        else:
            out.append(c)
    return "".join(out)


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def lowercase(text: str) -> str:
    return text.lower()


def a(text: str) -> str:
    """Prefix with 'a' or 'an'.

    'u' followed by a consonant and then 'i' (unicorn, unit) takes 'a';
    otherwise a leading vowel takes 'an'.
    """
    if text:
        if text[0].lower() == "u" and len(text) > 2 and text[2].lower() == "i":
            return "a " + text
        if is_vowel(text[0]):
            return "an " + text
    return "a " + text


def s(text: str) -> str:
    """Pluralize: -es after s/h/x, -ies after consonant+y, else -s."""
    if not text:
        return text
    last = text[-1]
    if last in ("s", "h", "x"):
        return text + "es"
    if last == "y":
        if len(text) < 2 or not is_vowel(text[-2]):
            return text[:-1] + "ies"
        return text + "s"
    return text + "s"


def first_s(text: str) -> str:
    """Pluralize only the first word ('green goblin' -> 'greens goblin')."""
    words = text.split(" ")
    words[0] = s(words[0])
    return " ".join(words)


def ed(text: str) -> str:
    """Past tense: -d after e, -ied after consonant+y, else -ed."""
    last = text[-1:]
    if last == "e":
        return text + "d"
    if last == "y":
        if len(text) < 2 or not is_vowel(text[-2]):
            return text[:-1] + "ied"
    return text + "ed"


ENG_MODIFIERS: ModifierMap = MappingProxyType(
    {
        "capitalizeAll": capitalize_all,
        "capitalize": capitalize,
        "lowercase": lowercase,
        "a": a,
        "s": s,
        "firstS": first_s,
        "ed": ed,
    }
)
