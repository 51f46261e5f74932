"""Starter .diffdigest.toml template."""

DEFAULT_TOML = """\
# diffdigest configuration
version = "1.0"

[digest]
max_input_tokens = 4000   # token budget for the diff context (1 token ~ 4 chars)
smart_threshold = 5       # commits with more files than this are digested
always_digest = false

[prompt]
template = "conventional" # conventional | simple | any custom template name
templates_dir = ".diffdigest-templates"

[output]
format = "text"           # text | json
show_summary = true
"""
