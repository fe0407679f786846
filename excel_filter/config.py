from __future__ import annotations

# Substrings in the filter column: "everyone" and "except".
ALL_MARKER = "כולם"
EXCEPT_MARKER = "חוץ"

ALLOWED_EXTENSIONS = {".xlsx", ".xlsm"}
MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024

OUTPUT_SHEET_TITLE = "Filtered"
DEFAULT_COLUMN_WIDTH = 15
DEFAULT_ROW_HEIGHT = 80  # points, fits IMAGE_HEIGHT_PX plus offsets

IMAGE_WIDTH_PX = 100
IMAGE_HEIGHT_PX = 100
IMAGE_OFFSET_PX = 5

IMAGES_KEY = "_images"
