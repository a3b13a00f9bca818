# otelbuild

Command-line tools for keeping a multi-module Go repository tidy:

- **chloggen**: keep changelog entries as small YAML files and fold them into
  `CHANGELOG.md` at release time.
- **checkapi**: scan the Go modules in a folder and check their exported API
  against a YAML configuration.
- **checkfile**: make sure every component imported by a components file comes
  with a given file, such as `README.md` or `metadata.yaml`.

## Installation

```
pip install otelbuild
```

## chloggen

Run these from the repository root. By default, entries live in `.chloggen/`,
the entry template is `.chloggen/TEMPLATE.yaml`, and the changelog is
`CHANGELOG.md`. Pass `--config FILE` to use a YAML configuration instead. It may
set `change_logs` (a mapping of key to changelog file), `default_change_logs`,
`entries_dir`, `template_yaml`, `summary_template` and `components`. Relative
paths are taken from the repository root.

```
chloggen new --filename my-change        # copy the template to .chloggen/my-change.yaml
chloggen validate                        # check every entry in the entries directory
chloggen update --version v1.2.0         # write the entries into the changelog and remove them
chloggen update --dry                    # print the generated text and change no files
chloggen update --component receiver/foo # use only the entries for one component
```

`new` replaces `/` and `\` in the file name with `_` and makes sure the name
ends in `.yaml` (a `.yml` ending is rewritten).

An entry looks like this:

```yaml
change_logs: [default]     # optional; the default changelogs are used when empty
change_type: enhancement   # breaking, deprecation, new_component, enhancement, bug_fix
component: receiver/foo
note: Add some bar
issues: [12345]
subtext: |
  Optional extra lines.
```

`validate` requires a known `change_type`, a non-blank `component` and `note`,
at least one issue, and `change_logs` naming configured changelogs. When
`components` is configured, the component must be one of them. When no
`default_change_logs` are configured, every entry must name its changelogs.

The changelog must contain the line `<!-- next version -->` exactly once. The
new section is inserted right after it.

### Summary templates

The release section is rendered with Jinja2. A custom `summary_template` file
receives `version`, `breaking_changes`, `deprecations`, `new_components`,
`enhancements` and `bug_fixes` (lists of entries), plus the functions
`entry(e)`, which renders one entry as a markdown list item, and
`indent(n, s)`, also available as the filter `s | indent(n)`. Undefined
variables are an error.

## checkapi

```
checkapi --folder . --config cmd/checkapi/config.yaml
```

For each `go.mod` found under the folder, outside paths starting with
`internal`, checkapi reads the `.go` files in that module's directory and
collects its exported functions and values and its struct types. It then checks:

- `allowed_functions`: if set, each module must export at least one function
  that matches a description (name, parameter types, return types) for its
  component class. The class comes from `metadata.yaml` under `status.class`,
  and is `pkg` when that file is missing.
- `unkeyed_literal_initialization`: if `enabled`, exported structs with at
  least one field, no more than `limit` fields, and only exported fields are
  reported.

`ignored_paths`, `excluded_files` (glob patterns) and `ignored_functions`
(regular expressions) narrow what is checked. All violations are printed and
the command exits with status 1.

## checkfile

```
checkfile --project-path path/to/project \
          --component-rel-path cmd/otelcontrib/components.go \
          --module-name example.com/project \
          --file-name metadata.yaml
```

checkfile reads the imports of the components file. Every import under the
module's `extension`, `receiver`, `processor` or `exporter` paths must have the
named file in its directory; otherwise the command exits with status 1.

## Using the library

```python
from otelbuild.chloggen.config import default_config
from otelbuild.chloggen.entry import read_entries
from otelbuild.chloggen.summary import generate_summary

cfg = default_config(".")
for key, entries in read_entries(cfg).items():
    print(key, generate_summary("v1.2.0", entries, cfg))
```

`otelbuild.checkapi.api.read_api(folder, ignored_functions, excluded_files)`
returns the `API` of a Go package directory, and
`otelbuild.checkapi.goparse.parse_source(text)` parses one Go file into its
top-level declarations.

## Limits

- The Go parser reads declarations only: function bodies are skipped and
  initializer expressions are not parsed. No type checking is done, so types
  are compared as written.
- chloggen has no shell completion command.