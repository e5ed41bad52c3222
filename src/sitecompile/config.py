# src/sitecompile/config.py

DEFAULT_SRC = "src"
DEFAULT_DIST = "dist"

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico", ".bmp", ".tiff"}
SCRIPT_EXTENSIONS = {".js", ".mjs", ".cjs"}
STYLESHEET_EXTENSIONS = {".css"}
MARKUP_EXTENSIONS = {".html", ".htm"}

# Bundler invocation
ESBUILD_COMMAND = "esbuild"
ESBUILD_ENV_VAR = "SITECOMPILE_ESBUILD"
ESBUILD_TARGET = "es2020"
ESBUILD_PLATFORM = "browser"

# Watcher: a path must stay quiet this long (seconds) before it is rebuilt
WATCH_QUIET_PERIOD = 0.1
WATCH_POLL_INTERVAL = 0.05
