"""
Variant selection: turning font file names into structured records and
narrowing them down to a single file from presets, hints or user answers.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .domain import BundleKey, FontRecord, Prompter, SelectionCriteria
from .exceptions import (
    AmbiguousSelectionError,
    FontSelectionError,
    InvalidChoiceError,
    PresetConflictError,
)

logger = logging.getLogger(__name__)

SIZE_NORMAL = "normal"
SIZE_35 = "35"
WIDTH_NORMAL = "normal"
WIDTH_LG = "lg"
STYLES = ("Regular", "Bold", "Italic", "BoldItalic")

# Axes are narrowed in this order; each maps to its fallback preference.
AXES: Tuple[Tuple[str, Tuple[str, ...], str], ...] = (
    ("base", ("standard", "nf", "hs"), "Choose family:"),
    ("size", (SIZE_NORMAL, SIZE_35), "Choose size:"),
    ("width", (WIDTH_NORMAL, WIDTH_LG), "Choose width:"),
    ("style", STYLES, "Choose style:"),
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DIGITS = re.compile(r"[0-9]+")


def normalize_text(text: str) -> str:
    """Lowercase ``text`` and drop everything but ASCII letters and digits."""
    return _NON_ALNUM.sub("", text.lower())


def bundle_key_from_text(text: str) -> BundleKey:
    """Guess the bundle a free-form font name or preset refers to."""
    norm = normalize_text(text)
    has_hs = "hs" in norm
    has_nf = "nf" in norm

    if has_hs and has_nf:
        raise PresetConflictError(f"text contains both HS and NF tokens: {text}")
    if has_hs:
        return BundleKey.HS
    if has_nf:
        return BundleKey.NF
    return BundleKey.STANDARD


def parse_preset(preset: str) -> SelectionCriteria:
    """
    Parse a compact preset such as ``35nflg-bold`` into selection criteria.

    Only the presence of tokens matters, never their position.

    Raises:
        PresetConflictError: If the preset names both HS and NF.
    """
    norm = normalize_text(preset)

    if "hs" in norm and "nf" in norm:
        raise PresetConflictError(
            f"preset cannot include both HS and NF: {preset}"
        )

    has_bold = "bold" in norm
    has_italic = "italic" in norm
    if "bolditalic" in norm or (has_bold and has_italic):
        style = "BoldItalic"
    elif has_bold:
        style = "Bold"
    elif has_italic:
        style = "Italic"
    else:
        style = "Regular"

    return SelectionCriteria(
        bundle=bundle_key_from_text(norm).value,
        size=SIZE_35 if "35" in norm else SIZE_NORMAL,
        width=WIDTH_LG if "lg" in norm else WIDTH_NORMAL,
        style=style,
    )


def resolve_explicit_font_name(names: Sequence[str], requested: str) -> str:
    """
    Resolve a user-supplied font name against the fonts in the archive.

    An exact case-insensitive match wins; otherwise the request must be a
    substring of exactly one name.

    Raises:
        AmbiguousSelectionError: If zero or several names match.
    """
    wanted = requested.lower()
    for name in names:
        if name.lower() == wanted:
            return name

    matches = [name for name in names if wanted in name.lower()]
    if len(matches) == 1:
        return matches[0]

    raise AmbiguousSelectionError(requested, matches or names)


def option_label(axis: str, value: str) -> str:
    if axis == "base" and value in {key.value for key in BundleKey}:
        return BundleKey(value).label
    if axis == "width" and value == WIDTH_LG:
        return "LG"
    return value


def pick_choice(options: Sequence[str], answer: str, default: str) -> str:
    """
    Map a raw 1-based answer onto ``options``.

    Raises:
        InvalidChoiceError: For non-numeric or out-of-range answers.
    """
    answer = answer.strip()
    if not answer:
        return default
    if not _DIGITS.fullmatch(answer):
        raise InvalidChoiceError("Please enter a number.")
    index = int(answer)
    if not 1 <= index <= len(options):
        raise InvalidChoiceError("Out of range. Select a listed number.")
    return options[index - 1]


def choose_option(
    question: str,
    options: Sequence[str],
    default: str,
    prompter: Prompter,
    label: Callable[[str], str] = str,
) -> str:
    """Ask until the user gives a usable answer; empty means ``default``."""
    labels = [label(option) for option in options]
    default_index = list(options).index(default)
    while True:
        answer = prompter.ask(question, labels, default_index)
        try:
            return pick_choice(options, answer, default)
        except InvalidChoiceError as e:
            logger.error(str(e))


def pick_default_option(options: Sequence[str], *preferred: Optional[str]) -> str:
    for value in preferred:
        if value and value in options:
            return value
    return options[0]


class FontSelector:
    """Resolves one font file name out of an archive's font listing."""

    def __init__(self, product: str, default_font_name: str):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.product = product
        self.default_font_name = default_font_name
        self._pattern = re.compile(
            rf"^{re.escape(product)}(35)?([A-Za-z]*)-"
            rf"(Regular|Bold|Italic|BoldItalic)\.(ttf|otf)$"
        )

    def classify_record(self, name: str) -> Optional[FontRecord]:
        """Parse a file name like ``UDEVGothic35NFLG-Bold.ttf``."""
        match = self._pattern.match(name)
        if match is None:
            return None

        size_flag, token, style, _ = match.groups()
        width = WIDTH_NORMAL
        if token.endswith("LG"):
            width = WIDTH_LG
            token = token[: -len("LG")]

        return FontRecord(
            file_name=name,
            base=normalize_text(token) if token else BundleKey.STANDARD.value,
            size=SIZE_35 if size_flag else SIZE_NORMAL,
            width=width,
            style=style,
        )

    def build_records(self, names: Sequence[str]) -> List[FontRecord]:
        records = []
        for name in names:
            record = self.classify_record(name)
            if record is not None:
                records.append(record)
        return records

    def pick_default_font_name(self, names: Sequence[str]) -> str:
        """
        Return the font installed when nothing narrower can be resolved.

        Raises:
            FontSelectionError: If ``names`` is empty.
        """
        p = self.product
        candidates = [
            self.default_font_name,
            f"{p}-Regular.ttf",
            f"{p}NF-Regular.ttf",
            f"{p}HS-Regular.ttf",
            f"{p}LG-Regular.ttf",
            f"{p}35-Regular.ttf",
            f"{p}35NF-Regular.ttf",
            f"{p}35HS-Regular.ttf",
            f"{p}35LG-Regular.ttf",
        ]
        for candidate in candidates:
            if candidate in names:
                return candidate

        for name in names:
            if re.search(r"Regular\.(ttf|otf)$", name, re.IGNORECASE):
                return name

        if names:
            return names[0]

        raise FontSelectionError("No font could be selected from the archive.")

    def select(
        self,
        names: Sequence[str],
        criteria: Optional[SelectionCriteria] = None,
        default_base: str = BundleKey.STANDARD.value,
        prompter: Optional[Prompter] = None,
    ) -> str:
        """
        Narrow ``names`` down to one file, axis by axis.

        With ``criteria`` (a parsed preset) no questions are asked and each
        axis defaults to the preset value when the archive offers it. Without
        criteria, the user is asked whenever ``prompter`` is interactive and an
        axis has more than one option.

        Args:
            names: Font file names found in the archive.
            criteria: Parsed preset, or None.
            default_base: Preferred base when no preset is given, usually the
                bundle of the chosen archive.
            prompter: Source of interactive answers.

        Returns:
            The selected font file name.

        Raises:
            FontSelectionError: If no font can be resolved.
        """
        records = self.build_records(names)
        if not records:
            return self.pick_default_font_name(names)

        interactive = (
            criteria is None
            and prompter is not None
            and prompter.is_interactive()
        )
        if criteria is not None:
            default_base = criteria.bundle or default_base

        chosen: Dict[str, str] = {}
        filtered = records
        for axis, preference, question in AXES:
            options = sorted({record.field(axis) for record in filtered})
            wanted = default_base if axis == "base" else None
            if criteria is not None and axis != "base":
                wanted = getattr(criteria, axis)
            value = pick_default_option(options, wanted, *preference)

            if interactive and len(options) > 1:
                value = choose_option(
                    question,
                    options,
                    value,
                    prompter,
                    label=lambda v, a=axis: option_label(a, v),
                )

            chosen[axis] = value
            filtered = [r for r in filtered if r.field(axis) == value]

        self.logger.debug(f"Selected attributes: {chosen}")
        return self._resolve(records, names, chosen)

    def _resolve(
        self,
        records: Sequence[FontRecord],
        names: Sequence[str],
        chosen: Dict[str, str],
    ) -> str:
        attempts = [
            chosen,
            dict(chosen, style="Regular"),
            dict(
                base=chosen["base"],
                size=SIZE_NORMAL,
                width=WIDTH_NORMAL,
                style="Regular",
            ),
        ]
        for wanted in attempts:
            for record in records:
                if all(record.field(axis) == value for axis, value in wanted.items()):
                    return record.file_name

        self.logger.warning(
            f"No font matches {chosen}; falling back to the default font."
        )
        return self.pick_default_font_name(names)
