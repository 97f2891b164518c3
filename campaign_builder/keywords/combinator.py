"""
Keyword combinator.

Builds keyword lists from three line-delimited term lists (prefixes, core
terms, suffixes) and a set of enabled combination modes. Generated keywords
can be excluded individually; exclusions are stored as literal keyword text
so they survive regeneration after the term lists are edited.
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set
from pydantic import BaseModel

from campaign_builder.errors import ConfigurationError
from campaign_builder.patterns.engine import interpolate_pattern

logger = logging.getLogger(__name__)


class CombinationMode(str, Enum):
    """Slices of the prefix/core/suffix product to emit."""
    CORE_ONLY = "coreOnly"
    PREFIX_CORE = "prefixCore"
    CORE_SUFFIX = "coreSuffix"
    FULL = "full"

    @classmethod
    def parse(cls, value: Any) -> "CombinationMode":
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unknown combination mode: {value}",
                {"valid_modes": [mode.value for mode in cls]}
            )


ALL_MODES = frozenset(CombinationMode)


class KeywordStats(BaseModel):
    """Counts shown next to the generated keyword table."""
    prefixes: int
    core_terms: int
    suffixes: int
    raw_combinations: int
    combinations: int
    excluded: int


def parse_terms(text: Optional[str]) -> List[str]:
    """Split a textarea value into trimmed, non-blank lines."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def _clean(terms: Iterable[str]) -> List[str]:
    return [term.strip() for term in terms if term and term.strip()]


def is_mode_applicable(mode: CombinationMode, prefixes: Iterable[str], suffixes: Iterable[str]) -> bool:
    """A mode is selectable only when the term lists it needs are non-empty."""
    has_prefixes = bool(_clean(prefixes))
    has_suffixes = bool(_clean(suffixes))
    if mode == CombinationMode.PREFIX_CORE:
        return has_prefixes
    if mode == CombinationMode.CORE_SUFFIX:
        return has_suffixes
    if mode == CombinationMode.FULL:
        return has_prefixes and has_suffixes
    return True


def applicable_modes(prefixes: Iterable[str], suffixes: Iterable[str]) -> Set[CombinationMode]:
    prefixes, suffixes = list(prefixes), list(suffixes)
    return {mode for mode in CombinationMode if is_mode_applicable(mode, prefixes, suffixes)}


def generate_combinations(
    prefixes: Iterable[str],
    core_terms: Iterable[str],
    suffixes: Iterable[str],
    enabled: Iterable[CombinationMode]
) -> List[str]:
    """
    Generate keywords from the term lists.

    For each core term the enabled modes are emitted in a fixed order:
    core only, prefix + core, core + suffix, prefix + core + suffix.
    Duplicates are dropped keeping the first occurrence.

    Args:
        prefixes: Prefix terms
        core_terms: Core terms
        suffixes: Suffix terms
        enabled: Enabled combination modes

    Returns:
        List[str]: Ordered unique keywords
    """
    enabled = set(enabled)
    valid_prefixes = _clean(prefixes)
    valid_cores = _clean(core_terms)
    valid_suffixes = _clean(suffixes)

    results: List[str] = []
    for core in valid_cores:
        if CombinationMode.CORE_ONLY in enabled:
            results.append(core)

        if CombinationMode.PREFIX_CORE in enabled:
            results.extend(f"{prefix} {core}" for prefix in valid_prefixes)

        if CombinationMode.CORE_SUFFIX in enabled:
            results.extend(f"{core} {suffix}" for suffix in valid_suffixes)

        if CombinationMode.FULL in enabled:
            results.extend(
                f"{prefix} {core} {suffix}"
                for prefix in valid_prefixes
                for suffix in valid_suffixes
            )

    return list(dict.fromkeys(results))


class KeywordCombinator:
    """
    Keyword builder session for one ad group.

    Holds the three term lists, the user's mode preferences and the
    exclusion set. ``on_change`` receives the filtered, non-interpolated
    keyword list whenever it changes.
    """

    def __init__(
        self,
        prefixes: str = "",
        core_terms: str = "",
        suffixes: str = "",
        enabled_modes: Optional[Iterable[Any]] = None,
        on_change: Optional[Callable[[List[str]], None]] = None
    ):
        self._prefix_text = prefixes
        self._core_text = core_terms
        self._suffix_text = suffixes
        if enabled_modes is None:
            self._enabled = set(ALL_MODES)
        else:
            self._enabled = {CombinationMode.parse(mode) for mode in enabled_modes}
        self._excluded: Set[str] = set()
        self._on_change = on_change
        self._last_emitted: Optional[List[str]] = None
        self._notify()

    @classmethod
    def from_keywords(
        cls,
        keywords: Optional[Iterable[str]],
        on_change: Optional[Callable[[List[str]], None]] = None
    ) -> "KeywordCombinator":
        """Restore saved keywords; they all land in the core column."""
        return cls(core_terms="\n".join(keywords or []), on_change=on_change)

    @property
    def prefixes(self) -> List[str]:
        return parse_terms(self._prefix_text)

    @property
    def core_terms(self) -> List[str]:
        return parse_terms(self._core_text)

    @property
    def suffixes(self) -> List[str]:
        return parse_terms(self._suffix_text)

    @property
    def enabled_modes(self) -> Set[CombinationMode]:
        """Modes the user has switched on, regardless of applicability."""
        return set(self._enabled)

    @property
    def effective_modes(self) -> Set[CombinationMode]:
        """Enabled modes whose prerequisite term lists are non-empty."""
        return self._enabled & applicable_modes(self.prefixes, self.suffixes)

    @property
    def excluded(self) -> Set[str]:
        return set(self._excluded)

    def set_terms(
        self,
        prefixes: Optional[str] = None,
        core_terms: Optional[str] = None,
        suffixes: Optional[str] = None
    ) -> List[str]:
        """Replace any of the term list texts; returns the new keyword list."""
        if prefixes is not None:
            self._prefix_text = prefixes
        if core_terms is not None:
            self._core_text = core_terms
        if suffixes is not None:
            self._suffix_text = suffixes
        return self._notify()

    def is_mode_applicable(self, mode: Any) -> bool:
        return is_mode_applicable(CombinationMode.parse(mode), self.prefixes, self.suffixes)

    def toggle_mode(self, mode: Any) -> List[str]:
        """Flip the stored preference for a mode."""
        mode = CombinationMode.parse(mode)
        if mode in self._enabled:
            self._enabled.remove(mode)
        else:
            self._enabled.add(mode)
        return self._notify()

    def raw_keywords(self) -> List[str]:
        """Generated keywords before exclusions."""
        return generate_combinations(self.prefixes, self.core_terms, self.suffixes, self._enabled)

    def keywords(self) -> List[str]:
        """Generated keywords after exclusions."""
        return [keyword for keyword in self.raw_keywords() if keyword not in self._excluded]

    def exclude(self, keyword: str) -> List[str]:
        self._excluded.add(keyword)
        return self._notify()

    def exclude_at(self, index: int) -> List[str]:
        """Exclude the keyword at ``index`` of the filtered list."""
        current = self.keywords()
        if index < 0 or index >= len(current):
            logger.warning(f"Invalid keyword delete index: {index}, list length: {len(current)}")
            return current
        return self.exclude(current[index])

    def restore_all(self) -> List[str]:
        self._excluded.clear()
        return self._notify()

    def stats(self) -> KeywordStats:
        raw = self.raw_keywords()
        filtered = [keyword for keyword in raw if keyword not in self._excluded]
        return KeywordStats(
            prefixes=len(self.prefixes),
            core_terms=len(self.core_terms),
            suffixes=len(self.suffixes),
            raw_combinations=len(raw),
            combinations=len(filtered),
            excluded=len(self._excluded)
        )

    def preview(self, sample_row: Optional[Mapping[str, Any]] = None) -> List[str]:
        """Filtered keywords interpolated against a sample row, for display only."""
        keywords = self.keywords()
        if sample_row is None:
            return keywords
        return [interpolate_pattern(keyword, sample_row) for keyword in keywords]

    def _notify(self) -> List[str]:
        keywords = self.keywords()
        if self._on_change is not None and keywords != self._last_emitted:
            self._on_change(list(keywords))
        self._last_emitted = keywords
        return keywords
