"""Locator strategies and candidate selector lists.

A logical UI target ("availability button", "next page") is described by a
``CandidateSelectorList``: an ordered tuple of strategies, the most specific
first. Every strategy renders to a single Playwright selector string.

- TextMatch: ``button:has-text("Reserve")``
- AttributeMatch: ``button[aria-label="Next month"]``
- StructuralMatch: raw CSS, or XPath when it starts with ``//``, ``(//``, ``./``
  or ``xpath=``
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_LOWER = "abcdefghijklmnopqrstuvwxyz"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class LocatorStrategy:
    """Base class for a single way of locating an element."""

    def selector(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class TextMatch(LocatorStrategy):
    text: str
    tag: str = "button"
    exact: bool = False

    def selector(self) -> str:
        pseudo = "text-is" if self.exact else "has-text"
        return f"{self.tag}:{pseudo}({_quote(self.text)})"


@dataclass(frozen=True)
class AttributeMatch(LocatorStrategy):
    attribute: str
    value: Optional[str] = None
    tag: str = ""
    operator: str = "="

    def __post_init__(self):
        if self.operator not in ("=", "*=", "^=", "$="):
            raise ValueError(f"Unsupported attribute operator: {self.operator}")

    def selector(self) -> str:
        if self.value is None:
            return f"{self.tag}[{self.attribute}]"
        return f"{self.tag}[{self.attribute}{self.operator}{_quote(self.value)}]"


@dataclass(frozen=True)
class StructuralMatch(LocatorStrategy):
    expression: str

    def __post_init__(self):
        if not self.expression.strip():
            raise ValueError("selector is empty")

    def selector(self) -> str:
        expression = self.expression.strip()
        if expression.lower().startswith("xpath="):
            return f"xpath={expression[6:]}"
        if expression.startswith(("//", "(//", "./")):
            return f"xpath={expression}"
        return expression


def contains_text_xpath(tag: str, needle: str, scope: str = "//") -> str:
    """XPath matching ``tag`` elements whose text contains ``needle``, ignoring case."""
    return (f"{scope}{tag}[contains(translate(normalize-space(.), '{_UPPER}', '{_LOWER}'), "
            f"{_xpath_literal(needle.lower())})]")


def _xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


@dataclass(frozen=True)
class CandidateSelectorList:
    """Ordered fallback strategies for one logical UI target."""

    name: str
    strategies: Tuple[LocatorStrategy, ...]

    def __post_init__(self):
        if not self.strategies:
            raise ValueError(f"Candidate list '{self.name}' has no strategies")

    def __iter__(self) -> Iterator[LocatorStrategy]:
        return iter(self.strategies)

    def __len__(self) -> int:
        return len(self.strategies)

    def describe(self) -> list[str]:
        return [strategy.selector() for strategy in self.strategies]

    def extended(self, *strategies: LocatorStrategy) -> "CandidateSelectorList":
        """Copy with extra lower-priority strategies appended."""
        return CandidateSelectorList(self.name, self.strategies + tuple(strategies))


def candidates(name: str, *strategies: LocatorStrategy) -> CandidateSelectorList:
    return CandidateSelectorList(name, tuple(strategies))
