from __future__ import annotations

# GH / API reads (release lookups)
GH_TIMEOUT_SECONDS = 60.0

# Idempotent GH read retry policy
GH_READ_RETRY_ATTEMPTS = 3
GH_READ_RETRY_DELAY_SECONDS = 1.0

# Tool archive download
TOOL_DOWNLOAD_TIMEOUT_SECONDS = 5 * 60.0
