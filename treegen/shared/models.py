"""
Domain models for decision trees.
Pure, immutable data classes with no external dependencies.

An ``Option`` is one of four explicit variants instead of a dict whose
meaning depends on which keys happen to be present:

- ``BranchingOption``  first incremental layer, text only
- ``ContinuingOption`` later incremental layer, resolved by another call
- ``TerminalOption``   leaf carrying a recommendation
- ``NextOption``       full-tree mode, owns the next ``DecisionNode``
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from .exceptions import MalformedResponse


class OptionKind(Enum):
    """Discriminator for the Option union."""
    BRANCHING = "branching"
    CONTINUING = "continuing"
    TERMINAL = "terminal"
    FULL_NEXT = "full_next"


@dataclass(frozen=True)
class BranchingOption:
    text: str

    kind = OptionKind.BRANCHING
    is_terminal = False

    def to_dict(self) -> dict:
        return {"text": self.text}


@dataclass(frozen=True)
class ContinuingOption:
    text: str

    kind = OptionKind.CONTINUING
    is_terminal = False

    def to_dict(self) -> dict:
        return {"text": self.text}


@dataclass(frozen=True)
class TerminalOption:
    text: str
    result: str

    kind = OptionKind.TERMINAL
    is_terminal = True

    def to_dict(self) -> dict:
        return {"text": self.text, "result": self.result}


@dataclass(frozen=True)
class NextOption:
    text: str
    next: "DecisionNode"

    kind = OptionKind.FULL_NEXT
    is_terminal = False

    def to_dict(self) -> dict:
        return {"text": self.text, "next": self.next.to_dict()}


Option = Union[BranchingOption, ContinuingOption, TerminalOption, NextOption]


@dataclass(frozen=True)
class DecisionNode:
    """One question with its ordered options. Options keep display order."""
    question: str
    options: tuple = ()

    def __post_init__(self):
        # Accept any sequence but always store a tuple
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": [opt.to_dict() for opt in self.options],
        }

    def depth(self) -> int:
        """Number of node levels, counting this one."""
        children = [opt.next.depth() for opt in self.options if isinstance(opt, NextOption)]
        return 1 + max(children, default=0)

    def iter_results(self) -> Iterator[str]:
        """Yield every terminal recommendation reachable from this node."""
        for opt in self.options:
            if isinstance(opt, TerminalOption):
                yield opt.result
            elif isinstance(opt, NextOption):
                yield from opt.next.iter_results()

    @classmethod
    def from_dict(cls, data: dict, first_level: bool = False) -> "DecisionNode":
        """
        Parse provider JSON tolerantly.

        Only a non-object payload is rejected. Missing fields get empty
        values, unknown fields are ignored, and an option carrying both
        ``next`` and ``result`` is treated as branching deeper.
        """
        if not isinstance(data, dict):
            raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")

        question = data.get("question")
        question = "" if question is None else str(question)

        raw_options = data.get("options")
        if not isinstance(raw_options, list):
            raw_options = []

        options = []
        for raw in raw_options:
            if not isinstance(raw, dict):
                continue
            options.append(_option_from_dict(raw, first_level))
        return cls(question=question, options=tuple(options))


def _option_from_dict(raw: dict, first_level: bool) -> Option:
    text = raw.get("text")
    text = "" if text is None else str(text)

    nxt = raw.get("next")
    if isinstance(nxt, dict):
        return NextOption(text=text, next=DecisionNode.from_dict(nxt))

    result = raw.get("result")
    if result:
        return TerminalOption(text=text, result=str(result))

    if first_level:
        return BranchingOption(text=text)
    return ContinuingOption(text=text)


_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off", "")


def as_bool(value, default: bool) -> bool:
    """Read a JSON-ish flag. "false" is False; anything unrecognised keeps ``default``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default


@dataclass(frozen=True)
class GenerationContext:
    """Path context for incremental mode. Built fresh by the caller per call."""
    is_first_level: bool = False
    previous_choices: tuple = ()
    current_question: str = ""
    selected_option: str = ""

    def __post_init__(self):
        if not isinstance(self.previous_choices, tuple):
            object.__setattr__(self, "previous_choices", tuple(self.previous_choices))

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationContext":
        choices = data.get("previousChoices") or ()
        if isinstance(choices, str):
            choices = (choices,)
        elif not isinstance(choices, (list, tuple)):
            choices = ()
        return cls(
            is_first_level=as_bool(data.get("isFirstLevel"), False),
            previous_choices=tuple(str(c) for c in choices),
            current_question=str(data.get("currentQuestion") or ""),
            selected_option=str(data.get("selectedOption") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "isFirstLevel": self.is_first_level,
            "previousChoices": list(self.previous_choices),
            "currentQuestion": self.current_question,
            "selectedOption": self.selected_option,
        }
