"""Default configuration values and starter .builddiff.toml template."""

# OS metadata that never belongs in an upload package
DEFAULT_EXCLUSIONS = frozenset({".DS_Store", "Thumbs.db", "desktop.ini"})

DEFAULT_OUTPUT_DIR = "build_for_upload"

DEFAULT_TOML = """\
# builddiff configuration
version = "1.0"

[compare]
# exclusions = ["robots.txt", "version.json"]   # added to the built-in OS metadata list
# exclude_patterns = ["*.map", "*/.DS_Store"]
# timeout = 120                                   # seconds before diff is killed
diff_command = "diff"

[output]
format = "terminal"       # terminal | json
show_summary = true

[package]
output_dir = "build_for_upload"
archive = true            # zip the staging directory to <output_dir>.zip
"""
