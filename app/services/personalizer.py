"""OS-aware personalization rules for the bundled documents.

Each policy is a plain list of :class:`PersonalizationRule` values, declared
for one detected environment and handed to a
:class:`~app.services.rewriter.DocumentTransformer` by :func:`personalize`.

Policies
--------
silent
    Hide the ``.os-*`` sections that do not match the detected OS.  Nothing
    about the detection is written into the page.

documentation (visible indicator)
    The silent rules, plus the detected OS, browser and country written into
    ``<meta name="user-*">`` tags and an ``active`` class on the ``.os-badge``
    whose ``data-os`` equals the detected OS.

demo (visible indicator)
    Writes ``user-os`` and hides sections like the silent policy, but treats
    ``ios`` as ``mac`` and ``android`` as ``linux``.  Badges inside
    ``.os-indicator`` that do not match are removed outright instead of hidden.

An ``unknown`` OS matches no section, so every ``.os-*`` section is hidden.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List

from app.models.environment import ClientEnvironment
from app.services.rewriter import DocumentTransformer, Element, Rule

HIDDEN_STYLE = "display: none;"
SECTION_OSES = ("mac", "windows", "linux")

_ALIASES = {"ios": "mac", "android": "linux"}

Predicate = Callable[[Element], bool]
Action = Callable[[Element], None]


def _always(element: Element) -> bool:
    return True


@dataclass(frozen=True)
class PersonalizationRule:
    selector: str
    action: Action
    predicate: Predicate = _always

    def __call__(self, element: Element) -> None:
        if self.predicate(element):
            self.action(element)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def hide(element: Element) -> None:
    element.set_attribute("style", HIDDEN_STYLE)


def remove(element: Element) -> None:
    element.remove()


def set_attribute(name: str, value: str) -> Action:
    def action(element: Element) -> None:
        element.set_attribute(name, value)

    return action


def add_class(name: str) -> Action:
    def action(element: Element) -> None:
        element.add_class(name)

    return action


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

def section_os(os: str, aliases: bool = False) -> str:
    """Return the ``.os-*`` section that should stay visible for *os*."""
    if aliases:
        return _ALIASES.get(os, os)
    return os


def _unless_visible(section: str, visible: str) -> Predicate:
    def predicate(element: Element) -> bool:
        return section != visible

    return predicate


def hide_rules(os: str, aliases: bool = False) -> List[PersonalizationRule]:
    visible = section_os(os, aliases)
    return [
        PersonalizationRule(f".os-{section}", hide, _unless_visible(section, visible))
        for section in SECTION_OSES
    ]


def silent_rules(os: str) -> List[PersonalizationRule]:
    return hide_rules(os)


def documentation_rules(env: ClientEnvironment) -> List[PersonalizationRule]:
    def is_detected_badge(element: Element) -> bool:
        return element.get_attribute("data-os") == env.os

    return [
        PersonalizationRule('meta[name="user-os"]', set_attribute("content", env.os)),
        PersonalizationRule('meta[name="user-browser"]', set_attribute("content", env.browser)),
        PersonalizationRule('meta[name="user-country"]', set_attribute("content", env.country)),
        *hide_rules(env.os),
        PersonalizationRule(".os-badge", add_class("active"), is_detected_badge),
    ]


def demo_rules(os: str) -> List[PersonalizationRule]:
    visible = section_os(os, aliases=True)
    # Registered after the hide rules so removal wins for indicator badges.
    indicator_rules = [
        PersonalizationRule(
            f".os-indicator .os-{section}", remove, _unless_visible(section, visible)
        )
        for section in SECTION_OSES
    ]
    return [
        PersonalizationRule('meta[name="user-os"]', set_attribute("content", os)),
        *hide_rules(os, aliases=True),
        *indicator_rules,
    ]


def personalize(document: str, rules: Iterable[PersonalizationRule]) -> Iterator[str]:
    """Yield *document* with *rules* applied, in streaming-sized chunks."""
    transformer = DocumentTransformer(Rule(rule.selector, rule) for rule in rules)
    return transformer.apply(document)
