"""Rendering of changelog sections from entries."""

from __future__ import annotations

from dataclasses import dataclass, field

import jinja2

from otelbuild.chloggen.config import Config
from otelbuild.chloggen.entry import ChangeType, Entry


class TemplateError(ValueError):
    """Raised when a summary template cannot be parsed or rendered."""


_DEFAULT_TEMPLATE = """{%- set sections = [
    ("\U0001f6d1 Breaking changes \U0001f6d1", breaking_changes),
    ("\U0001f6a9 Deprecations \U0001f6a9", deprecations),
    ("\U0001f680 New components \U0001f680", new_components),
    ("\U0001f4a1 Enhancements \U0001f4a1", enhancements),
    ("\U0001f9f0 Bug fixes \U0001f9f0", bug_fixes),
] %}
## {{ version }}
{% for title, changes in sections if changes %}
### {{ title }}

{% for change in changes %}{{ entry(change) }}
{% endfor %}{% endfor %}
<!-- previous-version -->

"""


def indent(n: int, s: str) -> str:
    """Prefix every line of ``s`` with ``n`` spaces."""
    pad = " " * n
    return pad + s.replace("\n", "\n" + pad)


def render_entry(entry: Entry) -> str:
    """Render one entry as a markdown list item."""
    issues = ", ".join(f"#{issue}" for issue in entry.issues)
    text = f"- `{entry.component}`: {entry.note} ({issues})"
    if entry.sub_text:
        text += "\n" + indent(2, entry.sub_text)
    return text


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["indent"] = lambda s, n: indent(n, s)
    env.globals["indent"] = indent
    env.globals["entry"] = render_entry
    return env


@dataclass
class Summary:
    """Entries of one release, sorted into sections by change type."""

    version: str
    breaking_changes: list[Entry] = field(default_factory=list)
    deprecations: list[Entry] = field(default_factory=list)
    new_components: list[Entry] = field(default_factory=list)
    enhancements: list[Entry] = field(default_factory=list)
    bug_fixes: list[Entry] = field(default_factory=list)

    def render(self, summary_template: str = "") -> str:
        """Render with the template file at ``summary_template`` or the built-in one."""
        env = _environment()
        if summary_template:
            with open(summary_template, encoding="utf-8") as fh:
                source = fh.read()
        else:
            source = _DEFAULT_TEMPLATE
        try:
            template = env.from_string(source)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateError(f"failed parsing template: {exc}") from exc
        try:
            return template.render(
                version=self.version,
                breaking_changes=self.breaking_changes,
                deprecations=self.deprecations,
                new_components=self.new_components,
                enhancements=self.enhancements,
                bug_fixes=self.bug_fixes,
            )
        except jinja2.TemplateError as exc:
            raise TemplateError(f"failed executing template: {exc}") from exc


def generate_summary(version: str, entries: list[Entry], cfg: Config) -> str:
    """Sort entries by change type and render the release summary."""
    summary = Summary(version=version)
    sections = {
        ChangeType.BREAKING.value: summary.breaking_changes,
        ChangeType.DEPRECATION.value: summary.deprecations,
        ChangeType.NEW_COMPONENT.value: summary.new_components,
        ChangeType.ENHANCEMENT.value: summary.enhancements,
        ChangeType.BUG_FIX.value: summary.bug_fixes,
    }
    for entry in entries:
        section = sections.get(entry.change_type)
        if section is not None:
            section.append(entry)
    return summary.render(cfg.summary_template)