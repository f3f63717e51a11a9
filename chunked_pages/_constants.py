"""Common literal values used across chunked_pages.

These constants keep tag names, class names, and filename templates
centralized so the markdown stages, the converter, and tests can import the
same values without drifting. Intended for internal use within the
chunked_pages package.

Examples
--------
>>> from chunked_pages import _constants
>>> _constants.MANIFEST_TEMPLATE.format(stem="2-program-structure")
'2-program-structure.chunks.json'
>>> _constants.SECTION_CLASS
'content-chunk'
"""

SECTION_TAG = "section"
SECTION_HEADING_TAG = "h2"
SECTION_CLASS = "content-chunk"
QUESTION_TAG = "i-question"

SECTION_SEPARATOR = "\n\n"
QUESTION_TRAILER = "\n\n"

OUTPUT_SUFFIX = ".html"
MANIFEST_TEMPLATE = "{stem}.chunks.json"
