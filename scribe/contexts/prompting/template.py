"""
Typed prompt template.

Wraps a Jinja2 template so callers fill named slots instead of running string
replacement over the template. Slot values are inserted verbatim: "$1", "\\1"
or "{{ x }}" inside a job description is never reinterpreted.
"""

from dataclasses import dataclass, field
from typing import FrozenSet

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, meta

from scribe.contexts.intake.exceptions import InputError

_ENV = Environment(
    # Catches silent failures
    undefined=StrictUndefined,
    autoescape=False,
    trim_blocks=False,
    lstrip_blocks=False,
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class PromptTemplate:
    """
    Prompt template with named slots.

    Attributes:
        source: Raw template text ({{ slot }} placeholders)
        slots: Names of the placeholders the template uses
    """

    source: str
    slots: FrozenSet[str] = field(init=False)
    _template: Template = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            parsed = _ENV.parse(self.source)
        except TemplateSyntaxError as e:
            raise InputError(f"Prompt template has invalid syntax: {e}") from e
        object.__setattr__(self, "slots", frozenset(meta.find_undeclared_variables(parsed)))
        object.__setattr__(self, "_template", _ENV.from_string(self.source))

    def render(self, **values: str) -> str:
        """
        Fill the template's slots.

        Values for slots the template does not use are ignored.

        Raises:
            InputError: If a slot used by the template has no value
        """
        missing = sorted(self.slots - values.keys())
        if missing:
            raise InputError(f"Prompt template slots missing values: {', '.join(missing)}")
        return self._template.render(**{name: values[name] for name in self.slots})
