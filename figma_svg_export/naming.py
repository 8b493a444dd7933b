"""
File Name Casing

Splits component names into words and re-joins them with one of the
supported casing strategies:

    "icon-home" -> camel: iconHome, pascal: IconHome, pascalSnake: Icon_Home,
                   constant: ICON_HOME, kebab: icon-home, snake: icon_home,
                   train: Icon-Home
"""

import re
import unicodedata
from typing import Callable, Dict, List, Union

from .models import FileNameStrategy

# anything that is not a letter or digit, in any script
_SEPARATORS = re.compile(r"[\W_]+")


def _is_boundary(prev: str, char: str, following: str) -> bool:
    # lower/digit followed by upper: "iconHome" -> "icon Home"
    if (prev.islower() or prev.isdigit()) and char.isupper():
        return True
    # acronym followed by a word: "SVGIcon" -> "SVG Icon"
    return prev.isupper() and char.isupper() and following.islower()


def _split_case(token: str) -> List[str]:
    words: List[str] = []
    start = 0
    for i in range(1, len(token)):
        following = token[i + 1] if i + 1 < len(token) else ""
        if _is_boundary(token[i - 1], token[i], following):
            words.append(token[start:i])
            start = i
    words.append(token[start:])
    return words


def split_words(name: str) -> List[str]:
    """Split a name into words on separators and case boundaries."""
    return [
        word
        for token in _SEPARATORS.split(unicodedata.normalize("NFC", name)) if token
        for word in _split_case(token)
    ]


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _pascal_word(word: str, index: int) -> str:
    # "Icon_2x" stays readable instead of collapsing into "Icon2x"
    if index > 0 and word[:1].isdigit():
        return "_" + _capitalize(word)
    return _capitalize(word)


def camel_case(name: str) -> str:
    words = split_words(name)
    return "".join(
        word.lower() if index == 0 else _pascal_word(word, index)
        for index, word in enumerate(words)
    )


def pascal_case(name: str) -> str:
    return "".join(_pascal_word(word, index) for index, word in enumerate(split_words(name)))


def pascal_snake_case(name: str) -> str:
    return "_".join(_capitalize(word) for word in split_words(name))


def constant_case(name: str) -> str:
    return "_".join(word.upper() for word in split_words(name))


def kebab_case(name: str) -> str:
    return "-".join(word.lower() for word in split_words(name))


def snake_case(name: str) -> str:
    return "_".join(word.lower() for word in split_words(name))


def train_case(name: str) -> str:
    return "-".join(_capitalize(word) for word in split_words(name))


CASES: Dict[FileNameStrategy, Callable[[str], str]] = {
    FileNameStrategy.CAMEL: camel_case,
    FileNameStrategy.PASCAL: pascal_case,
    FileNameStrategy.PASCAL_SNAKE: pascal_snake_case,
    FileNameStrategy.CONSTANT: constant_case,
    FileNameStrategy.KEBAB: kebab_case,
    FileNameStrategy.SNAKE: snake_case,
    FileNameStrategy.TRAIN: train_case,
}


def get_case_strategy(strategy: Union[FileNameStrategy, str]) -> Callable[[str], str]:
    """Look up a casing function; raises ValueError for unknown strategies."""
    return CASES[FileNameStrategy(strategy)]


def file_name_for(name: str, strategy: Union[FileNameStrategy, str] = FileNameStrategy.KEBAB) -> str:
    """File name (with .svg extension) for a component name."""
    return f"{get_case_strategy(strategy)(name)}.svg"
