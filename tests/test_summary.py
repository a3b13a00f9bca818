import pytest

from otelbuild.chloggen.config import Config
from otelbuild.chloggen.entry import ChangeType, Entry
from otelbuild.chloggen.summary import (
    Summary,
    TemplateError,
    generate_summary,
    indent,
    render_entry,
)


def _all_entries():
    return [
        Entry(change_type=ChangeType.BREAKING.value, component="foo", note="broke foo", issues=[123]),
        Entry(change_type=ChangeType.BREAKING.value, component="bar", note="broke bar", issues=[345, 678],
              sub_text="more details"),
        Entry(change_type=ChangeType.DEPRECATION.value, component="foo", note="deprecate foo", issues=[1234]),
        Entry(change_type=ChangeType.DEPRECATION.value, component="bar", note="deprecate bar",
              issues=[3456, 6789], sub_text="more details"),
        Entry(change_type=ChangeType.ENHANCEMENT.value, component="foo", note="enhance foo", issues=[12]),
        Entry(change_type=ChangeType.ENHANCEMENT.value, component="bar", note="enhance bar", issues=[34, 67],
              sub_text="more details"),
        Entry(change_type=ChangeType.BUG_FIX.value, component="foo", note="bug foo", issues=[1]),
        Entry(change_type=ChangeType.BUG_FIX.value, component="bar", note="bug bar", issues=[3, 6],
              sub_text="more details"),
        Entry(change_type=ChangeType.NEW_COMPONENT.value, component="foo", note="new foo", issues=[2]),
        Entry(change_type=ChangeType.NEW_COMPONENT.value, component="bar", note="new bar", issues=[4, 7],
              sub_text="more details"),
    ]


EXPECTED_FULL = (
    "\n"
    "## 1.0\n"
    "\n"
    "### \U0001f6d1 Breaking changes \U0001f6d1\n"
    "\n"
    "- `foo`: broke foo (#123)\n"
    "- `bar`: broke bar (#345, #678)\n"
    "  more details\n"
    "\n"
    "### \U0001f6a9 Deprecations \U0001f6a9\n"
    "\n"
    "- `foo`: deprecate foo (#1234)\n"
    "- `bar`: deprecate bar (#3456, #6789)\n"
    "  more details\n"
    "\n"
    "### \U0001f680 New components \U0001f680\n"
    "\n"
    "- `foo`: new foo (#2)\n"
    "- `bar`: new bar (#4, #7)\n"
    "  more details\n"
    "\n"
    "### \U0001f4a1 Enhancements \U0001f4a1\n"
    "\n"
    "- `foo`: enhance foo (#12)\n"
    "- `bar`: enhance bar (#34, #67)\n"
    "  more details\n"
    "\n"
    "### \U0001f9f0 Bug fixes \U0001f9f0\n"
    "\n"
    "- `foo`: bug foo (#1)\n"
    "- `bar`: bug bar (#3, #6)\n"
    "  more details\n"
    "\n"
    "<!-- previous-version -->\n"
    "\n"
)


def test_summary_default_template():
    assert generate_summary("1.0", _all_entries(), Config()) == EXPECTED_FULL


def test_summary_skips_empty_sections():
    entries = [Entry(change_type="bug_fix", component="testbed", note="Fix blah", issues=[12346, 12347])]
    expected = (
        "\n## v0.45.0\n\n### \U0001f9f0 Bug fixes \U0001f9f0\n\n"
        "- `testbed`: Fix blah (#12346, #12347)\n\n<!-- previous-version -->\n\n"
    )
    assert generate_summary("v0.45.0", entries, Config()) == expected


def test_summary_ignores_unknown_change_type():
    entries = [Entry(change_type="fake", component="x", note="y", issues=[1])]
    assert generate_summary("1.0", entries, Config()) == "\n## 1.0\n\n<!-- previous-version -->\n\n"


def test_custom_summary(tmp_path):
    template = tmp_path / "custom.tmpl"
    template.write_text(
        "# {{ version }}\n{% for c in breaking_changes %}{{ entry(c) }}\n{% endfor %}"
        "{% for c in breaking_changes %}{{ c.note | indent(4) }}\n{% endfor %}",
        encoding="utf-8",
    )
    entries = _all_entries()[:2]
    actual = generate_summary("1.0", entries, Config(summary_template=str(template)))
    assert actual == (
        "# 1.0\n"
        "- `foo`: broke foo (#123)\n"
        "- `bar`: broke bar (#345, #678)\n"
        "  more details\n"
        "    broke foo\n"
        "    broke bar\n"
    )


def test_custom_summary_missing_key(tmp_path):
    template = tmp_path / "bad.tmpl"
    template.write_text("{{ no_such_value }}", encoding="utf-8")
    with pytest.raises(TemplateError, match="failed executing template"):
        Summary(version="1.0").render(str(template))


def test_custom_summary_syntax_error(tmp_path):
    template = tmp_path / "broken.tmpl"
    template.write_text("{% for x in %}", encoding="utf-8")
    with pytest.raises(TemplateError):
        Summary(version="1.0").render(str(template))


def test_custom_summary_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Summary(version="1.0").render(str(tmp_path / "absent.tmpl"))


def test_indent():
    assert indent(2, "a\nb") == "  a\n  b"
    assert indent(0, "x") == "x"
    assert indent(3, "") == "   "


def test_render_entry_nested_subtext():
    entry = Entry(
        change_type="breaking",
        component="processor/oops",
        note="Change behavior when ...",
        issues=[12350],
        sub_text="- foo\n  - bar",
    )
    assert render_entry(entry) == "- `processor/oops`: Change behavior when ... (#12350)\n  - foo\n    - bar"