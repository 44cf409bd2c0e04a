"""
NotePolish Backend - Summary Output Segmenter
===============================================

What:  Splits generated summary text into a summary paragraph and an ordered
       list of takeaway lines.
How:   Pure function, no I/O:
       1. Split once on the first case-insensitive "Key Takeaways:" or
          "Takeaways:" heading.
       2. Text before the heading, trimmed, is the summary.
       3. Text after it is split on line / bullet boundaries
          ("\\n- ", "\\n  " or a bare newline).
       4. Each piece is trimmed; empty pieces are dropped; order and duplicates
          are kept.
       No heading means the whole trimmed text is the summary and there are no
       takeaways.

The line splitting is a best-effort heuristic over free-form model output. A
multi-line takeaway is split into several entries, and a heading word repeated
later stays verbatim inside a takeaway line.
"""

import re

from notepolish.schemas.completion import SummaryResult

TAKEAWAYS_HEADING = re.compile(r"key takeaways:|takeaways:", re.IGNORECASE)
TAKEAWAY_BOUNDARY = re.compile(r"\n- |\n  |\n")


def segment_summary(text: str) -> SummaryResult:
    """
    Turn generated text into a SummaryResult. Never raises on odd formatting.

    Example:
        >>> segment_summary("Notes are clear.\\nTakeaways:\\n- Point A\\n- Point B")
        SummaryResult(summary_text='Notes are clear.', takeaways=['Point A', 'Point B'])
    """
    normalized = text.replace("\r\n", "\n")
    parts = TAKEAWAYS_HEADING.split(normalized, maxsplit=1)
    summary_text = parts[0].strip()
    if len(parts) == 1:
        return SummaryResult(summary_text=summary_text, takeaways=[])

    takeaways = [
        piece.strip()
        for piece in TAKEAWAY_BOUNDARY.split(parts[1])
        if piece.strip()
    ]
    return SummaryResult(summary_text=summary_text, takeaways=takeaways)
